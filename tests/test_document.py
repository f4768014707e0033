"""Tests for rows, tab projection and the row store."""

from cactus.document import Document
from cactus.row import Row, project
from cactus.syntax import Highlight


def _texts(doc: Document) -> list[str]:
    return [row.text for row in doc.rows]


def _check_invariants(doc: Document) -> None:
    for i, row in enumerate(doc.rows):
        assert row.idx == i
        assert len(row.marks) == len(row.display)


class TestProjection:
    """Tab expansion and column mapping."""

    def test_lone_tab_expands_to_eight_spaces(self):
        display, col_map = project("\t")
        assert display == " " * 8
        assert col_map == [0, 8]

    def test_tab_after_five_columns_expands_to_three(self):
        display, _ = project("abcde\tx")
        assert display == "abcde   x"

    def test_no_tabs_is_identity(self):
        display, col_map = project("hello")
        assert display == "hello"
        assert col_map == [0, 1, 2, 3, 4, 5]

    def test_custom_tab_stop(self):
        display, _ = project("a\tb", tab_stop=4)
        assert display == "a   b"

    def test_cx_to_rx(self):
        row = Row(idx=0, text="a\tbc")
        row.update()
        assert row.cx_to_rx(0) == 0
        assert row.cx_to_rx(1) == 1
        assert row.cx_to_rx(2) == 8
        assert row.cx_to_rx(4) == 10

    def test_cx_to_rx_clamps(self):
        row = Row(idx=0, text="ab")
        row.update()
        assert row.cx_to_rx(99) == 2
        assert row.cx_to_rx(-3) == 0

    def test_rx_to_cx_inside_tab(self):
        row = Row(idx=0, text="\tx")
        row.update()
        assert row.rx_to_cx(0) == 0
        assert row.rx_to_cx(3) == 0
        assert row.rx_to_cx(7) == 0
        assert row.rx_to_cx(8) == 1
        assert row.rx_to_cx(100) == 2

    def test_round_trip_preserves_order(self):
        row = Row(idx=0, text="a\tbc\t\td")
        row.update()
        for cx in range(row.size + 1):
            rx = row.cx_to_rx(cx)
            back = row.rx_to_cx(rx)
            assert row.cx_to_rx(back) >= rx
            assert back == cx


class TestRowStore:
    """Structural edits."""

    def test_empty_document(self):
        doc = Document()
        assert doc.num_rows == 0
        assert doc.dirty == 0

    def test_load_resets_dirty(self):
        doc = Document(["one", "two"])
        assert _texts(doc) == ["one", "two"]
        assert not doc.modified
        _check_invariants(doc)

    def test_insert_row_clamps_position(self):
        doc = Document(["a"])
        doc.insert_row(99, "z")
        doc.insert_row(-5, "first")
        assert _texts(doc) == ["first", "a", "z"]
        _check_invariants(doc)

    def test_insert_row_renumbers(self):
        doc = Document(["a", "b", "c"])
        doc.insert_row(1, "new")
        assert [row.idx for row in doc.rows] == [0, 1, 2, 3]

    def test_delete_row(self):
        doc = Document(["a", "b", "c"])
        doc.delete_row(1)
        assert _texts(doc) == ["a", "c"]
        assert doc.modified
        _check_invariants(doc)

    def test_delete_row_out_of_range_is_noop(self):
        doc = Document(["a"])
        doc.delete_row(5)
        doc.delete_row(-1)
        assert _texts(doc) == ["a"]
        assert not doc.modified

    def test_insert_char(self):
        doc = Document(["ac"])
        doc.insert_char(0, 1, "b")
        assert _texts(doc) == ["abc"]
        assert doc.modified

    def test_insert_char_past_end_appends(self):
        doc = Document(["ab"])
        doc.insert_char(0, 42, "!")
        assert _texts(doc) == ["ab!"]

    def test_insert_char_negative_col_clamps_to_start(self):
        doc = Document(["ab"])
        doc.insert_char(0, -3, "!")
        assert _texts(doc) == ["!ab"]

    def test_insert_char_missing_row_is_noop(self):
        doc = Document(["ab"])
        doc.insert_char(3, 0, "x")
        assert _texts(doc) == ["ab"]
        assert not doc.modified

    def test_delete_char(self):
        doc = Document(["abc"])
        doc.delete_char(0, 1)
        assert _texts(doc) == ["ac"]

    def test_delete_char_out_of_range_is_noop(self):
        doc = Document(["abc"])
        doc.delete_char(0, 3)
        doc.delete_char(1, 0)
        assert _texts(doc) == ["abc"]
        assert not doc.modified

    def test_insert_char_updates_display(self):
        doc = Document(["ab"])
        doc.insert_char(0, 1, "\t")
        assert doc.rows[0].display == "a       b"
        _check_invariants(doc)

    def test_typing_reproduces_text(self):
        doc = Document()
        doc.insert_row(0, "")
        for i, ch in enumerate("hello, world"):
            doc.insert_char(0, i, ch)
        assert doc.to_bytes() == b"hello, world\n"

    def test_split_then_join_restores_row(self):
        doc = Document(["hello world"])
        doc.split_row(0, 5)
        assert _texts(doc) == ["hello", " world"]
        col = doc.join_row_into_previous(1)
        assert col == 5
        assert _texts(doc) == ["hello world"]
        _check_invariants(doc)

    def test_split_at_every_column_round_trips(self):
        for k in range(len("a\tb c") + 1):
            doc = Document(["a\tb c"])
            doc.split_row(0, k)
            doc.join_row_into_previous(1)
            assert _texts(doc) == ["a\tb c"]

    def test_join_first_row_is_noop(self):
        doc = Document(["a", "b"])
        assert doc.join_row_into_previous(0) == -1
        assert _texts(doc) == ["a", "b"]

    def test_append_text(self):
        doc = Document(["foo"])
        doc.append_text(0, "bar")
        assert _texts(doc) == ["foobar"]


class TestSerialization:
    """Saving to a flat byte buffer."""

    def test_empty_document_is_empty_buffer(self):
        assert Document().to_bytes() == b""

    def test_single_row(self):
        data = Document(["abc"]).to_bytes()
        assert data == b"abc\n"
        assert len(data) == 4

    def test_every_row_gets_newline(self):
        assert Document(["a", "", "b"]).to_bytes() == b"a\n\nb\n"

    def test_undecodable_bytes_survive(self):
        text = b"caf\xe9".decode("utf-8", "surrogateescape")
        assert Document([text]).to_bytes() == b"caf\xe9\n"


class TestMarksInvariant:
    """Style marks always cover the display text."""

    def test_marks_follow_every_edit(self):
        doc = Document(["int\tx = 1;", "/* open", "close */"], filename="t.c")
        _check_invariants(doc)
        doc.insert_char(0, 0, "\t")
        doc.split_row(1, 3)
        doc.delete_char(3, 0)
        doc.join_row_into_previous(2)
        doc.delete_row(0)
        _check_invariants(doc)
        assert all(isinstance(m, Highlight) for row in doc.rows for m in row.marks)
