"""Tests for the edit transaction, validation reporting and cloning."""

import pytest

from stepsweep.progression import Field, Progression

ALL_FIELDS = ["from_value", "to_value", "increment", "selected"]


class TestEditTransaction:
    def test_cancel_restores_increment(self, recorder):
        p = Progression(0.0, 10.0, 1.0)
        p.subscribe(recorder)
        p.begin_edit()
        p.increment = 0.5
        p.cancel_edit()
        assert p.increment == 1.0
        recorder.clear()
        p.end_edit()
        assert recorder.fields == ALL_FIELDS

    def test_cancel_restores_all_numeric_fields(self):
        p = Progression(0.0, 10.0, 1.0)
        p.begin_edit()
        p.from_value = 2.0
        p.to_value = 4.0
        p.increment = 0.0
        p.cancel_edit()
        assert (p.from_value, p.to_value, p.increment) == (0.0, 10.0, 1.0)
        assert not p.is_empty
        assert p.is_increasing
        assert p.has_value(7.0)

    def test_cancel_keeps_selection(self):
        p = Progression(0.0, 10.0, 1.0)
        p.begin_edit()
        p.selected = True
        p.cancel_edit()
        assert p.selected

    def test_cancel_leaves_edit_open(self):
        p = Progression(0.0, 10.0, 1.0)
        p.begin_edit()
        p.cancel_edit()
        assert p.editing
        p.end_edit()
        assert not p.editing

    def test_cancel_when_idle_is_noop(self):
        p = Progression(0.0, 10.0, 1.0)
        p.from_value = 3.0
        p.cancel_edit()
        assert p.from_value == 3.0

    def test_end_edit_when_idle_notifies(self, recorder):
        p = Progression(0.0, 10.0, 1.0)
        p.subscribe(recorder)
        p.end_edit()
        assert recorder.fields == ALL_FIELDS

    def test_second_begin_resnapshots(self):
        p = Progression(0.0, 10.0, 1.0)
        p.begin_edit()
        p.increment = 2.0
        p.begin_edit()
        p.increment = 5.0
        p.cancel_edit()
        assert p.increment == 2.0

    def test_end_edit_clears_snapshot(self):
        p = Progression(0.0, 10.0, 1.0)
        p.begin_edit()
        p.increment = 2.0
        p.end_edit()
        p.cancel_edit()
        assert p.increment == 2.0

    def test_edit_context_commits(self, recorder):
        p = Progression(0.0, 10.0, 1.0)
        p.subscribe(recorder)
        with p.edit():
            p.to_value = 20.0
        assert p.to_value == 20.0
        assert recorder.fields == ["to_value"] + ALL_FIELDS
        assert not p.editing

    def test_edit_context_cancels_on_error(self, recorder):
        p = Progression(0.0, 10.0, 1.0)
        with pytest.raises(KeyError):
            with p.edit():
                p.to_value = 20.0
                raise KeyError("boom")
        assert p.to_value == 10.0
        assert not p.editing

    def test_template_cancel(self, template):
        template.begin_edit()
        template.cancel_edit()
        template.end_edit()
        assert str(template) == "*From -5 To 5 By 0"


class TestValidation:
    def test_valid_has_no_errors(self):
        p = Progression(0.0, 10.0, 1.0)
        assert p.error == ""
        for field in Field:
            assert p.field_error(field) == ""

    def test_inverted_range(self):
        p = Progression(0.0, 10.0, 1.0)
        p.from_value = 20.0
        assert p.field_error(Field.FROM_VALUE) == "from_value cannot be greater than to_value."
        assert p.field_error(Field.TO_VALUE) == "to_value cannot be less than from_value."
        assert p.field_error(Field.INCREMENT) == ""
        assert p.error == "to_value cannot be less than from_value.\n"

    def test_decreasing_range_reports_fields_only(self, descending):
        assert descending.error == ""
        assert descending.field_error(Field.FROM_VALUE) != ""

    def test_field_by_name(self):
        p = Progression(0.0, 10.0, 1.0)
        p.to_value = -1.0
        assert p.field_error("to_value") != ""
        assert p.field_error("selected") == ""

    def test_errors_are_evaluated_on_demand(self):
        p = Progression(0.0, 10.0, 1.0)
        p.from_value = 20.0
        assert p.error
        p.from_value = 0.0
        assert p.error == ""


class TestClone:
    def test_copies_all_fields(self):
        p = Progression(0.0, 10.0, 0.5, from_template=True)
        p.selected = True
        c = p.clone()
        assert c is not p
        assert c == p
        assert c.selected
        assert c.from_template

    def test_independent(self, recorder):
        p = Progression(0.0, 10.0, 0.5)
        p.subscribe(recorder)
        c = p.clone()
        c.from_value = 3.0
        c.selected = True
        assert p.from_value == 0.0
        assert not p.selected
        assert recorder.events == []

    def test_membership_agrees(self, ascending, descending):
        for p in (ascending, descending, Progression(), Progression(0.0, 1.0, float("nan"))):
            c = p.clone()
            for x in (-1.0, 0.0, 0.3, 0.35, 1.0, 1.5, 2.0, 3.0, 5.0):
                assert c.has_value(x) == p.has_value(x)

    def test_clone_of_inconsistent_edit_state(self):
        p = Progression(0.0, 10.0, 1.0)
        p.from_value = 20.0
        c = p.clone()
        assert c.from_value == 20.0
