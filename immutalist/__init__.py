from .list import ImmutableList
from .option import Option, Some, NONE, from_nullable
from .errors import ImmutalistError, InvalidArgument, UnsupportedOperation, EmptyOptional
from .random import Random, default_random, set_default_random, current_random, use_random
from .logger import ConsoleLogger, get_logger
