"""
ImmutableList basics: construction, Option-returning access, and chaining.

Run: python examples/list_basics.py
"""
import json

from immutalist import ImmutableList, use_random


def main():
    nums = ImmutableList.of(1, 2, 3, None, 4, None, 5)
    words = ImmutableList.of("apple", "banana", "cherry", "date")

    # Compact drops None but keeps other falsy values
    compacted = nums.compact()
    print("compact:", compacted.to_list())

    # Accessors return Option instead of None
    print("first:", compacted.first().unwrap())
    print("at(10):", compacted.at(10).unwrap_or("missing"))

    # Seed the random source for a reproducible shuffle
    with use_random(42):
        shuffled = words.shuffle()
        pick = shuffled.random()
    print("shuffled:", shuffled.to_list(), "picked:", pick.unwrap_or("list is empty"))

    # Grouping and counting produce plain dicts
    print("group_by length:", words.group_by(lambda w: str(len(w))))
    print("count_by parity:", compacted.count_by(lambda x: "even" if x % 2 == 0 else "odd"))

    # Edits never touch the receiver
    edited = compacted.insert_at(1, 10).move(0, -1).swap(0, 1)
    print("edited:", edited.to_list(), "original:", compacted.to_list())

    print("json:", json.dumps({"chunks": compacted.chunk(2).to_json()}))


if __name__ == "__main__":
    main()
