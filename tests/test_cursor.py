"""Unit tests for the scanning cursor."""

from utils.dice import Cursor


class TestCursor:
    def test_exhausted_skips_whitespace(self) -> None:
        assert Cursor("   \t\n").is_exhausted()
        assert not Cursor("  d6").is_exhausted()

    def test_read_unsigned_int_is_greedy(self) -> None:
        cursor = Cursor("  123d6")
        assert cursor.read_unsigned_int() == 123
        assert cursor.consume("d")
        assert cursor.read_unsigned_int() == 6
        assert cursor.is_exhausted()

    def test_read_unsigned_int_without_digits(self) -> None:
        cursor = Cursor("d6")
        assert cursor.read_unsigned_int() is None
        assert cursor.consume("d")

    def test_read_signed_int(self) -> None:
        assert Cursor("+5").read_signed_int() == 5
        assert Cursor(" - 15").read_signed_int() == -15
        assert Cursor("7").read_signed_int() == 7

    def test_sign_without_digits_is_not_consumed(self) -> None:
        cursor = Cursor("+ xyzzy")
        assert cursor.read_signed_int() is None
        assert cursor.consume("+")

    def test_consume_mismatch_leaves_cursor(self) -> None:
        cursor = Cursor("&d4")
        assert not cursor.consume(";")
        assert cursor.consume("&")
        assert cursor.consume("d")

    def test_checkpoint_is_independent(self) -> None:
        cursor = Cursor("4x3d8")
        saved = cursor.checkpoint()
        assert cursor.read_unsigned_int() == 4
        assert cursor.consume("x")
        cursor.read_unsigned_int()
        assert saved.read_unsigned_int() == 4  # snapshot was unaffected by the live cursor
        cursor.restore(Cursor("4x3d8"))
        assert cursor.read_unsigned_int() == 4

    def test_out_of_range_int_is_not_read(self) -> None:
        cursor = Cursor("2147483648d6")
        assert cursor.read_unsigned_int() is None
        assert cursor.read_signed_int() is None
        assert Cursor("2147483647").read_unsigned_int() == 2**31 - 1

    def test_very_long_digit_run(self) -> None:
        cursor = Cursor("9" * 5000)
        assert cursor.read_unsigned_int() is None
        assert not cursor.is_exhausted()

    def test_leading_zeros(self) -> None:
        assert Cursor("0000000000000000000006").read_unsigned_int() == 6
