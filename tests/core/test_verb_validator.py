"""
Tests for catalog input validation.
"""

import pytest

from verb_trainer.core.schemas.validator import (
    ValidationError,
    require_valid_verb_records,
    validate_verb_records,
)


class TestValidateVerbRecords:
    """Tests for validate_verb_records()."""

    def test_validate_when_valid_batch_then_no_errors(self, verb_record):
        records = [verb_record(), verb_record("sehen", stem="seh")]

        assert validate_verb_records(records) == []

    def test_validate_when_not_array_then_single_error(self, verb_record):
        assert validate_verb_records(verb_record()) == ["Verb data must be an array"]

    def test_validate_when_empty_array_then_single_error(self):
        assert validate_verb_records([]) == ["Verb data must contain at least one verb"]

    def test_validate_when_missing_infinitive_then_numbered_error(self, verb_record):
        record = verb_record()
        del record["infinitive"]

        errors = validate_verb_records([record])

        assert errors == ["Verb 1: Missing or invalid 'infinitive' field"]

    def test_validate_when_bad_verb_type_then_message_names_record_and_choices(self, verb_record):
        records = [verb_record(), verb_record("sehen", verb_type="funky")]

        errors = validate_verb_records(records)

        assert errors == [
            'Verb 2 ("sehen"): Invalid \'verb_type\' "funky". '
            "Must be one of: weak, strong, irregular, modal"
        ]

    @pytest.mark.parametrize("level", [0, 6, "2", True, None])
    def test_validate_when_bad_difficulty_then_error(self, verb_record, level):
        errors = validate_verb_records([verb_record(difficulty_level=level)])

        assert errors == [
            'Verb 1 ("gehen"): \'difficulty_level\' must be a number between 1 and 5'
        ]

    def test_validate_when_several_problems_then_all_reported(self, verb_record):
        # Arrange
        record = verb_record(english_translation="", stem="  ", conjugations={})

        # Act
        errors = validate_verb_records([record])

        # Assert
        assert len(errors) == 3
        assert any("'english_translation'" in e for e in errors)
        assert any("'stem'" in e for e in errors)
        assert any("at least one tense" in e for e in errors)

    def test_validate_when_tense_has_no_persons_then_error(self, verb_record):
        errors = validate_verb_records([verb_record(conjugations={"präsens": {}})])

        assert errors == [
            'Verb 1 ("gehen"): Tense \'präsens\' must have at least one person conjugation'
        ]

    def test_validate_when_form_not_string_then_error(self, verb_record):
        errors = validate_verb_records([verb_record(conjugations={"präsens": {"ich": 5}})])

        assert errors == [
            'Verb 1 ("gehen"): Conjugation for \'präsens\' - \'ich\' must be a string'
        ]

    def test_validate_when_duplicate_infinitive_then_error(self, verb_record):
        errors = validate_verb_records([verb_record(), verb_record()])

        assert len(errors) == 1
        assert "Duplicate infinitive" in errors[0]
        assert errors[0].startswith('Verb 2 ("gehen")')

    def test_validate_when_record_not_object_then_error(self, verb_record):
        errors = validate_verb_records([verb_record(), "gehen"])

        assert errors == ["Verb 2: Record must be an object"]


class TestStrictValidation:
    """Tests for jsonschema-backed strict mode."""

    def test_strict_when_valid_then_no_errors(self, verb_record):
        assert validate_verb_records([verb_record()], strict=True) == []

    def test_strict_when_invalid_then_schema_errors_appended(self, verb_record):
        errors = validate_verb_records(
            [verb_record(conjugations={"präsens": {"ich": 5}})], strict=True
        )

        assert any(e.startswith("Schema: 0.conjugations.präsens.ich") for e in errors)
        assert not errors[0].startswith("Schema:")


class TestRequireValidVerbRecords:
    """Tests for require_valid_verb_records()."""

    def test_require_when_valid_then_returns_none(self, verb_record):
        assert require_valid_verb_records([verb_record()]) is None

    def test_require_when_invalid_then_raises_with_all_errors(self, verb_record):
        records = [verb_record(), verb_record("sehen", stem=""), verb_record("laufen", stem="")]

        with pytest.raises(ValidationError) as exc_info:
            require_valid_verb_records(records)

        assert exc_info.value.path == "[1]"
        assert len(exc_info.value.errors) == 2
        assert "2 error(s)" in str(exc_info.value)
