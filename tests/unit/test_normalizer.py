"""Unit tests for dataset normalization and raw text parsing."""

import pytest


@pytest.mark.unit
class TestDatasetResolution:
    """Test that payloads resolve to exactly one shape."""

    @pytest.mark.parametrize(
        "payload,expected",
        [
            ([{"a": 1}, {"a": 2}], "row_sequence"),
            ({"a": [1, 2], "b": [3, 4]}, "column_map"),
            ({"a": 1, "b": "x"}, "single_record"),
            ([1, 2, 3], "numeric_sequence"),
            ([], "numeric_sequence"),
            ({}, "single_record"),
        ],
    )
    def test_shapes(self, payload, expected):
        """Test each shape."""
        from labmind.services.analysis import resolve_dataset

        assert resolve_dataset(payload).kind.value == expected

    def test_first_column_decides_mapping_shape(self):
        """Test that a scalar in the first field makes a single record."""
        from labmind.services.analysis import DatasetKind, resolve_dataset

        dataset = resolve_dataset({"name": "trial", "values": [1, 2]})

        assert dataset.kind == DatasetKind.SINGLE_RECORD

    def test_scalars_become_numeric_sequences(self):
        """Test that a scalar is wrapped and None is empty."""
        from labmind.services.analysis import DatasetKind, resolve_dataset

        assert resolve_dataset(5).payload == [5]
        assert resolve_dataset(None).payload == []
        assert resolve_dataset(None).kind == DatasetKind.NUMERIC_SEQUENCE

    def test_resolve_is_idempotent(self):
        """Test that resolving a Dataset returns it unchanged."""
        from labmind.services.analysis import Dataset

        dataset = Dataset.resolve([1, 2])

        assert Dataset.resolve(dataset) is dataset


@pytest.mark.unit
class TestRecordsAndColumns:
    """Test the row and column views."""

    def test_column_map_records_pad_with_none(self):
        """Test that shorter columns produce None cells."""
        from labmind.services.analysis import resolve_dataset

        records = resolve_dataset({"a": [1, 2], "b": [3]}).records()

        assert records == [{"a": 1, "b": 3}, {"a": 2, "b": None}]

    def test_single_record_is_one_row(self):
        """Test that a single record yields one row."""
        from labmind.services.analysis import resolve_dataset

        assert resolve_dataset({"a": 1}).records() == [{"a": 1}]

    def test_row_column_keeps_finite_numbers(self, sample_rows):
        """Test column projection over records."""
        from labmind.services.analysis import extract_column

        assert extract_column(sample_rows, "score") == [81.5, 88.0, 92.5]
        assert extract_column(sample_rows, "group") == []

    def test_column_map_column(self, sample_columns):
        """Test column lookup in a column map."""
        from labmind.services.analysis import extract_column

        assert extract_column(sample_columns, "y") == [2, 4, 6, 8, 10]
        assert extract_column(sample_columns, "missing") == []

    def test_numeric_sequence_ignores_column_name(self):
        """Test that a bare list is its own column."""
        from labmind.services.analysis import extract_column

        assert extract_column([1, "a", True, 2.5], "anything") == [1, 2.5]

    def test_no_column_name_on_records(self, sample_rows):
        """Test that records without a column name yield nothing."""
        from labmind.services.analysis import extract_column

        assert extract_column(sample_rows) == []


@pytest.mark.unit
class TestRawTextParsing:
    """Test parsing of data submitted as text."""

    def test_json_text(self):
        """Test that JSON text is decoded."""
        from labmind.services.analysis import DatasetKind, resolve_dataset

        dataset = resolve_dataset('[{"a": 1}, {"a": 2}]')

        assert dataset.kind == DatasetKind.ROW_SEQUENCE
        assert dataset.payload == [{"a": 1}, {"a": 2}]

    def test_csv_text(self):
        """Test that CSV with a header becomes records with typed values."""
        from labmind.services.analysis import DatasetKind, resolve_dataset

        dataset = resolve_dataset("height,weight\n170,65.5\n182,80", "csv")

        assert dataset.kind == DatasetKind.ROW_SEQUENCE
        assert dataset.payload == [
            {"height": 170, "weight": 65.5},
            {"height": 182, "weight": 80.0},
        ]
        assert dataset.column("height") == [170, 182]

    def test_csv_empty_cells_become_none(self):
        """Test that blank CSV cells are None."""
        from labmind.services.analysis import parse_raw_text

        rows = parse_raw_text("a,b\n1,\n2,3")

        assert rows[0]["b"] is None
        assert rows[1]["b"] == 3

    def test_csv_mixed_column_keeps_numbers(self):
        """Test that a text cell does not turn the numbers of its column into strings."""
        from labmind.services.analysis import extract_column, parse_raw_text

        rows = parse_raw_text("dose,label\n1,a\nx,b\n3,c")

        assert [row["dose"] for row in rows] == [1, "x", 3]
        assert extract_column(rows, "dose") == [1, 3]

    def test_csv_lab_markers_stay_text(self):
        """Test detection-limit markers next to decimal readings."""
        from labmind.services.analysis import extract_column, resolve_dataset

        dataset = resolve_dataset("sample,conc\nA,0.42\nB,<LOD\nC,ND\nD,-\nE,1.5", "csv")

        assert [row["conc"] for row in dataset.records()] == [0.42, "<LOD", "ND", "-", 1.5]
        assert extract_column(dataset, "conc") == [0.42, 1.5]

    def test_csv_short_row_cells_are_none(self):
        """Test that missing trailing fields become None."""
        from labmind.services.analysis import parse_raw_text

        rows = parse_raw_text("a,b,c\n1,2\n4,5,6", "csv")

        assert rows[0]["c"] is None
        assert rows[1]["c"] == 6

    def test_number_list_text(self):
        """Test that a line of numbers becomes a numeric sequence."""
        from labmind.services.analysis import parse_raw_text

        assert parse_raw_text("1, 2, 3.5") == [1, 2, 3.5]

    def test_array_hint_reads_lines_as_numbers(self):
        """Test that the array hint skips CSV parsing."""
        from labmind.services.analysis import parse_raw_text

        assert parse_raw_text("1\n2\n3", "array") == [1, 2, 3]

    def test_blank_text(self):
        """Test that blank text is an empty dataset."""
        from labmind.services.analysis import parse_raw_text

        assert parse_raw_text("   ") == []


@pytest.mark.unit
class TestPreview:
    """Test the data preview sent to the model."""

    def test_compact_json_with_ellipsis(self):
        """Test the serialized form."""
        from labmind.services.analysis.normalizer import build_preview

        assert build_preview([1, 2, 3]) == "[1,2,3]..."

    def test_budget_truncates(self):
        """Test that the preview is cut to the budget before the ellipsis."""
        from labmind.services.analysis.normalizer import build_preview

        preview = build_preview(list(range(1000)), budget=10)

        assert preview == "[0,1,2,3,4..."
        assert len(preview) == 13
