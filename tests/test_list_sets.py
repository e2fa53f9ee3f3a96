import unittest

from immutalist import ImmutableList, InvalidArgument


class TestSetOps(unittest.TestCase):
    def setUp(self):
        self.a = ImmutableList.of(1, 2, 3, 4, 5)
        self.b = ImmutableList.of(3, 4, 5, 6, 7)

    def test_union(self):
        self.assertEqual(self.a.union(self.b).to_list(), [1, 2, 3, 4, 5, 6, 7])

    def test_intersection(self):
        self.assertEqual(self.a.intersection(self.b).to_list(), [3, 4, 5])

    def test_intersection_consumes_each_match_once(self):
        x = ImmutableList.of(1, 1, 1, 2)
        self.assertEqual(x.intersection(ImmutableList.of(1, 1, 2)).to_list(), [1, 1, 2])
        self.assertEqual(x.intersection(ImmutableList.of(1)).to_list(), [1])

    def test_difference(self):
        self.assertEqual(self.a.difference(self.b).to_list(), [1, 2])
        self.assertEqual(ImmutableList.of(1, 1, 2).difference(ImmutableList.of(2)).to_list(), [1, 1])

    def test_unhashable_elements(self):
        x = ImmutableList.of([1], [2], [1])
        y = ImmutableList.of([2], [2])
        self.assertEqual(x.unique().to_list(), [[1], [2]])
        self.assertEqual(x.difference(y).to_list(), [[1], [1]])
        self.assertEqual(x.intersection(y).to_list(), [[2]])
        self.assertEqual(x.union(y).to_list(), [[1], [2]])

    def test_other_must_be_list(self):
        for op in ("union", "intersection", "difference", "zip"):
            with self.assertRaises(InvalidArgument, msg=op):
                getattr(self.a, op)([1, 2])

    def test_unique(self):
        self.assertEqual(ImmutableList.of(1, 2, 3, 2, 1).unique().to_list(), [1, 2, 3])

    def test_unique_by(self):
        lst = ImmutableList.of({"id": 1}, {"id": 2}, {"id": 1, "x": 0})
        self.assertEqual(lst.unique_by(lambda x: x["id"]).to_list(), [{"id": 1}, {"id": 2}])


class TestGrouping(unittest.TestCase):
    def test_group_by(self):
        lst = ImmutableList.of({"type": "apple"}, {"type": "banana"}, {"type": "apple"})
        out = lst.group_by(lambda x: x["type"])
        self.assertEqual(out, {
            "apple": [{"type": "apple"}, {"type": "apple"}],
            "banana": [{"type": "banana"}],
        })
        self.assertEqual(list(out), ["apple", "banana"])

    def test_group_by_rejects_non_str_key(self):
        with self.assertRaises(InvalidArgument):
            ImmutableList.of(1, 2).group_by(lambda x: x % 2)

    def test_count_by(self):
        out = ImmutableList.of(1, 2, 3, 4, 5).count_by(lambda x: "even" if x % 2 == 0 else "odd")
        self.assertEqual(out, {"odd": 3, "even": 2})
        self.assertEqual(list(out), ["odd", "even"])
        self.assertEqual(ImmutableList.of("a", "bb", "cc").count_by(len), {1: 1, 2: 2})

    def test_count_by_rejects_unhashable_key(self):
        with self.assertRaises(InvalidArgument):
            ImmutableList.of(1, 2).count_by(lambda x: [x])

    def test_partition(self):
        match, rest = ImmutableList.of(1, 2, 3, 4, 5).partition(lambda x: x % 2 == 0)
        self.assertEqual(match.to_list(), [2, 4])
        self.assertEqual(rest.to_list(), [1, 3, 5])
        defined, missing = ImmutableList.of(1, 2, None, 3, None, 4).partition(lambda x: x is not None)
        self.assertEqual(defined.to_list(), [1, 2, 3, 4])
        self.assertEqual(missing.to_list(), [None, None])

    def test_zip(self):
        out = ImmutableList.of(1, 2, 3).zip(ImmutableList.of(6, 7, 8))
        self.assertEqual(out.to_list(), [(1, 6), (2, 7), (3, 8)])
        self.assertEqual(ImmutableList.of(1, 2, 3).zip(ImmutableList.of("a", "b", "c", "d", "e")).size, 3)
        self.assertEqual(ImmutableList.of(1, 2, 3, 4, 5).zip(ImmutableList.of("a", "b", "c")).size, 3)
