"""Tests for expression parsing, matching and the public helpers."""

import pytest
from datetime import datetime

from cronnext import (
    CronExpression,
    CronFieldType,
    CronParseError,
    CronParser,
    Occurrences,
    is_valid_expression,
    must_parse,
    parse,
    validate_expression,
)


# =============================================================================
# CronParseError Tests
# =============================================================================


class TestCronParseError:
    """Tests for CronParseError exception."""

    def test_error_attributes(self):
        """Test expression and field are kept on the error."""
        error = CronParseError("bad", "* * * * *", "minute")
        assert str(error) == "bad"
        assert error.expression == "* * * * *"
        assert error.field == "minute"

    def test_is_value_error(self):
        """Test callers can catch ValueError."""
        with pytest.raises(ValueError):
            parse("nonsense")


# =============================================================================
# CronParser Tests
# =============================================================================


class TestCronParser:
    """Tests for field count and layout detection."""

    def test_five_fields(self):
        """Test seconds default to 0 and years to the full range."""
        expr = CronParser("30 9 15 6 3").parse()
        assert expr.seconds == (0,)
        assert expr.minutes == (30,)
        assert expr.hours == (9,)
        assert expr.day_of_month.days == frozenset({15})
        assert expr.months == (6,)
        assert expr.day_of_week.days == frozenset({3})
        assert expr.years == tuple(range(1970, 2100))
        assert not expr.has_seconds

    def test_six_fields_with_seconds(self):
        """Test the seconds layout."""
        expr = parse("15 0 9 * * *")
        assert expr.seconds == (15,)
        assert expr.minutes == (0,)
        assert expr.hours == (9,)
        assert expr.has_seconds

    def test_six_fields_with_year(self):
        """Test the year layout is chosen when the last field holds a year."""
        expr = parse("0 9 * * * 2024")
        assert expr.seconds == (0,)
        assert expr.minutes == (0,)
        assert expr.hours == (9,)
        assert expr.years == (2024,)
        assert not expr.has_seconds

    def test_six_fields_with_year_range(self):
        """Test a year range in the last field."""
        assert parse("0 9 * * * 2020-2022").years == (2020, 2021, 2022)

    def test_seven_fields(self):
        """Test the full layout."""
        expr = parse("1 2 3 4 5 ? 2030")
        assert expr.seconds == (1,)
        assert expr.minutes == (2,)
        assert expr.hours == (3,)
        assert expr.day_of_month.days == frozenset({4})
        assert expr.months == (5,)
        assert not expr.day_of_week.restricted
        assert expr.years == (2030,)

    @pytest.mark.parametrize("text,count", [("0 9 *", 3), ("* * * *", 4), ("* * * * * * * *", 8), ("", 0)])
    def test_invalid_field_count(self, text, count):
        """Test wrong number of fields."""
        with pytest.raises(CronParseError) as exc:
            parse(text)
        assert str(exc.value) == (
            f"Invalid number of fields: {count}. Expected 5, 6, or 7 fields."
        )
        assert exc.value.field is None

    def test_extra_whitespace(self):
        """Test fields may be separated by any whitespace."""
        assert parse("  0\t9  * *   *  ") == parse("0 9 * * *")

    def test_error_carries_expression(self):
        """Test field errors name the full expression."""
        with pytest.raises(CronParseError) as exc:
            parse("0 0 32 * *")
        assert str(exc.value) == "syntax error in day-of-month field: '32'"
        assert exc.value.expression == "0 0 32 * *"
        assert exc.value.field == "day-of-month"

    def test_invalid_interval(self):
        """Test an oversized step in a seconds field."""
        with pytest.raises(CronParseError, match=r"^invalid interval \*/60$"):
            parse("*/60 * * * * *")


# =============================================================================
# Alias Tests
# =============================================================================


class TestAliases:
    """Tests for @-aliases."""

    @pytest.mark.parametrize(
        "alias,text",
        [
            ("@yearly", "0 0 1 1 *"),
            ("@annually", "0 0 1 1 *"),
            ("@monthly", "0 0 1 * *"),
            ("@weekly", "0 0 * * 0"),
            ("@daily", "0 0 * * *"),
            ("@midnight", "0 0 * * *"),
            ("@hourly", "0 * * * *"),
            ("@every_minute", "* * * * *"),
            ("@every_second", "* * * * * *"),
        ],
    )
    def test_alias(self, alias, text):
        """Test every alias expands to its canonical schedule."""
        assert parse(alias) == parse(text)

    def test_alias_case_insensitive(self):
        """Test aliases in upper case."""
        assert parse("@DAILY") == CronExpression.daily()

    def test_alias_keeps_text(self):
        """Test the original text is kept."""
        assert parse("@hourly").expression == "@hourly"

    def test_unknown_alias(self):
        """Test an unknown alias is a field-count error."""
        with pytest.raises(CronParseError, match="Invalid number of fields: 1"):
            parse("@fortnightly")


# =============================================================================
# Equality Tests
# =============================================================================


class TestEquality:
    """Tests for value equality and hashing."""

    def test_equal_on_normalised_fields(self):
        """Test different spellings of the same schedule are equal."""
        a = parse("0 0 * * MON-FRI")
        b = parse("00 00 ? * 1-5")
        assert a == b
        assert hash(a) == hash(b)
        assert a.expression != b.expression

    def test_optional_seconds_do_not_change_identity(self):
        """Test explicit zero seconds equals the 5-field form."""
        assert parse("0 0 0 * * *") == parse("0 0 * * *")

    def test_sunday_spellings(self):
        """Test 0, 7 and SUN are the same weekday."""
        assert parse("0 0 * * 0") == parse("0 0 * * 7") == parse("0 0 * * sun")

    def test_not_equal(self):
        """Test different schedules."""
        assert parse("0 0 * * *") != parse("0 1 * * *")
        assert parse("0 0 L * *") != parse("0 0 LW * *")

    def test_usable_in_sets(self):
        """Test expressions can be set members."""
        assert len({parse("@daily"), parse("0 0 * * *"), parse("@hourly")}) == 2

    def test_immutable(self):
        """Test fields cannot be reassigned."""
        expr = parse("0 0 * * *")
        with pytest.raises(AttributeError):
            expr.hours = (1,)

    def test_str_and_repr(self):
        """Test text representations."""
        expr = parse("0 9 * * MON-FRI")
        assert str(expr) == "0 9 * * MON-FRI"
        assert repr(expr) == "CronExpression('0 9 * * MON-FRI')"


# =============================================================================
# Field Access Tests
# =============================================================================


class TestGetField:
    """Tests for get_field."""

    def test_generic_fields(self):
        """Test normalised values of generic fields."""
        expr = parse("*/20 9-11 * JAN,JUL *")
        assert expr.get_field(CronFieldType.SECOND) == (0,)
        assert expr.get_field(CronFieldType.MINUTE) == (0, 20, 40)
        assert expr.get_field(CronFieldType.HOUR) == (9, 10, 11)
        assert expr.get_field(CronFieldType.MONTH) == (1, 7)
        assert len(expr.get_field(CronFieldType.YEAR)) == 130

    def test_day_fields(self):
        """Test plain values of the day fields."""
        expr = parse("0 0 15,1,L * FRI-MON")
        assert expr.get_field(CronFieldType.DAY_OF_MONTH) == (1, 15)
        assert expr.get_field(CronFieldType.DAY_OF_WEEK) == (0, 1, 5, 6)


# =============================================================================
# Matching Tests
# =============================================================================


class TestMatches:
    """Tests for matches."""

    def test_weekday_schedule(self):
        """Test a weekday morning schedule."""
        expr = parse("0 9 * * MON-FRI")
        assert expr.matches(datetime(2024, 1, 15, 9, 0))  # Monday
        assert not expr.matches(datetime(2024, 1, 13, 9, 0))  # Saturday
        assert not expr.matches(datetime(2024, 1, 15, 9, 1))
        assert not expr.matches(datetime(2024, 1, 15, 9, 0, 30))

    def test_ignores_microseconds(self):
        """Test matching is to the second."""
        assert parse("0 9 * * *").matches(datetime(2024, 1, 15, 9, 0, 0, 999))

    def test_last_day(self):
        """Test L uses the same day resolution as next."""
        expr = parse("0 0 L * *")
        assert expr.matches(datetime(2024, 2, 29))
        assert not expr.matches(datetime(2023, 2, 27))
        assert expr.matches(datetime(2023, 2, 28))

    def test_year(self):
        """Test year restriction."""
        expr = parse("0 0 1 1 * 2030")
        assert expr.matches(datetime(2030, 1, 1))
        assert not expr.matches(datetime(2031, 1, 1))


# =============================================================================
# Factory Tests
# =============================================================================


class TestFactories:
    """Tests for predefined factories."""

    def test_factories(self):
        """Test factories build the expected schedules."""
        assert CronExpression.yearly() == parse("@yearly")
        assert CronExpression.monthly() == parse("@monthly")
        assert CronExpression.weekly() == parse("@weekly")
        assert CronExpression.daily() == parse("@daily")
        assert CronExpression.hourly() == parse("@hourly")

    def test_every_n(self):
        """Test interval factories."""
        assert CronExpression.every_n_minutes(15).minutes == (0, 15, 30, 45)
        assert CronExpression.every_n_hours(6).hours == (0, 6, 12, 18)

    def test_every_n_invalid(self):
        """Test an interval that cannot fit in the field."""
        with pytest.raises(CronParseError):
            CronExpression.every_n_minutes(60)


# =============================================================================
# Iteration Tests
# =============================================================================


class TestIteration:
    """Tests for next_n and iter."""

    def test_next_n(self):
        """Test next_n returns strictly increasing instants."""
        results = parse("*/5 * * * *").next_n(5, datetime(2013, 9, 2, 8, 44, 32))
        assert results == [
            datetime(2013, 9, 2, 8, 45),
            datetime(2013, 9, 2, 8, 50),
            datetime(2013, 9, 2, 8, 55),
            datetime(2013, 9, 2, 9, 0),
            datetime(2013, 9, 2, 9, 5),
        ]

    def test_next_n_stops_at_sentinel(self):
        """Test next_n is shorter when the schedule runs out."""
        results = parse("0 0 1 1 * 2098-2099").next_n(5, datetime(2090, 1, 1))
        assert results == [datetime(2098, 1, 1), datetime(2099, 1, 1)]

    def test_iter_is_restartable(self):
        """Test every iteration starts again from the same instant."""
        occurrences = parse("@hourly").iter(datetime(2024, 1, 1), limit=3)
        assert isinstance(occurrences, Occurrences)
        first = list(occurrences)
        assert first == list(occurrences)
        assert first == [
            datetime(2024, 1, 1, 1),
            datetime(2024, 1, 1, 2),
            datetime(2024, 1, 1, 3),
        ]

    def test_iter_is_lazy(self):
        """Test an unlimited iterator can be consumed partially."""
        occurrences = iter(parse("* * * * * *").iter(datetime(2024, 1, 1)))
        assert next(occurrences) == datetime(2024, 1, 1, 0, 0, 1)
        assert next(occurrences) == datetime(2024, 1, 1, 0, 0, 2)


# =============================================================================
# Validation Function Tests
# =============================================================================


class TestValidation:
    """Tests for the validation helpers."""

    def test_validate_valid(self):
        """Test a valid expression has no errors."""
        assert validate_expression("0 0 L * *") == []

    def test_validate_invalid(self):
        """Test the error message is returned."""
        assert validate_expression("0 0 * * 8") == ["syntax error in day-of-week field: '8'"]

    def test_is_valid(self):
        """Test the boolean form."""
        assert is_valid_expression("0 9 * * MON#2")
        assert not is_valid_expression("0 9 * *")

    def test_must_parse(self):
        """Test must_parse returns the expression."""
        assert must_parse("@daily") == CronExpression.daily()

    def test_must_parse_raises_runtime_error(self):
        """Test must_parse wraps the parse error."""
        with pytest.raises(RuntimeError) as exc:
            must_parse("0 0 32 * *")
        assert isinstance(exc.value.__cause__, CronParseError)
        assert not isinstance(exc.value, CronParseError)
