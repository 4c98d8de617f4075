import unittest

from judgeview.filters import label_counts
from judgeview.render import EMPTY_MESSAGE, render_label_counts, render_table, render_tsv
from judgeview.types import JudgmentRecord

RECORDS = [
    JudgmentRecord("15", "0", "shot_long_identifier", "A", "rel"),
    JudgmentRecord("15", "1", "s2", "B", "nonrel"),
]


class RenderTests(unittest.TestCase):
    def test_table_has_header_rule_and_rows(self) -> None:
        lines = render_table(RECORDS).splitlines()
        self.assertEqual(len(lines), 4)
        self.assertTrue(lines[0].startswith("Query ID"))
        self.assertTrue(set(lines[1]) <= {"-", " "})
        self.assertIn("shot_long_identifier", lines[2])
        # columns are aligned
        self.assertEqual(lines[2].index("A "), lines[3].index("B "))

    def test_empty_table(self) -> None:
        self.assertEqual(render_table([]), EMPTY_MESSAGE)

    def test_tsv(self) -> None:
        self.assertEqual(
            render_tsv(RECORDS), "15\t0\tshot_long_identifier\tA\trel\n15\t1\ts2\tB\tnonrel\n"
        )

    def test_label_count_grid(self) -> None:
        lines = render_label_counts(label_counts(RECORDS)).splitlines()
        self.assertEqual(lines[0].split(), ["judgement", "A", "B", "total"])
        self.assertEqual(lines[1].split(), ["nonrel", "0", "1", "1"])
        self.assertEqual(lines[2].split(), ["rel", "1", "0", "1"])
        self.assertEqual(lines[3].split(), ["total", "1", "1", "2"])

    def test_label_count_grid_empty(self) -> None:
        self.assertEqual(render_label_counts(label_counts([])), EMPTY_MESSAGE)


if __name__ == "__main__":
    unittest.main()
