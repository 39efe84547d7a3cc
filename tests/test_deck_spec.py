"""Tests for the deck spec model, import schema, units and history."""

import pytest

from core.deck_spec import (
    BoardDirection,
    DeckShape,
    DeckSpec,
    FurnitureItem,
    MalformedImportError,
    RailingStyle,
    SpecHistory,
    StairType,
    compose_length,
    format_length,
    load_spec_document,
    split_length,
)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def l_shaped_spec():
    """An L-shaped deck with stairs, railings and a table."""
    return DeckSpec(
        shape=DeckShape.L_SHAPED,
        width=16.0,
        length=12.0,
        wing_width=8.0,
        wing_length=6.0,
        board_length=16.0,
        railings=True,
        railing_style=RailingStyle.CABLE,
        stairs=True,
        stair_steps=4,
        stair_type=StairType.SPIRAL,
        furniture=[FurnitureItem(type="table", x=1.0, z=-2.0, rotation=90.0)],
    )


# ============================================================================
# DeckSpec
# ============================================================================


class TestDeckSpec:
    """Tests for the DeckSpec dataclass."""

    def test_defaults(self):
        spec = DeckSpec()

        assert spec.shape == DeckShape.RECTANGULAR
        assert spec.width == 12.0
        assert spec.length == 12.0
        assert spec.height == 1.0
        assert spec.board_direction == BoardDirection.HORIZONTAL
        assert spec.is_auto_board_length
        assert spec.stair_steps == 3
        assert spec.stair_width == 4.0
        assert spec.show_dimensions is True
        assert spec.color == "#8b4513"
        assert spec.furniture == []

    def test_round_trip(self, l_shaped_spec):
        assert DeckSpec.from_dict(l_shaped_spec.to_dict()) == l_shaped_spec

    def test_to_dict_uses_document_keys(self, l_shaped_spec):
        data = l_shaped_spec.to_dict()

        assert data["shape"] == "l-shaped"
        assert data["wingWidth"] == 8.0
        assert data["boardLength"] == 16.0
        assert data["railingStyle"] == "cable"
        assert data["stairType"] == "spiral"
        assert data["furniture"] == [{"type": "table", "x": 1.0, "z": -2.0, "rotation": 90.0}]

    def test_from_dict_fills_missing_keys(self):
        spec = DeckSpec.from_dict({"width": 20})

        assert spec.width == 20
        assert spec.length == 12.0
        assert spec.board_length == "auto"

    def test_copy_is_independent(self, l_shaped_spec):
        copy = l_shaped_spec.copy()
        copy.width = 30.0
        copy.furniture.append(FurnitureItem(type="chair"))

        assert l_shaped_spec.width == 16.0
        assert len(l_shaped_spec.furniture) == 1

    def test_step_height(self):
        spec = DeckSpec(height=1.5, stair_steps=3)
        assert spec.step_height == pytest.approx(0.5)

    def test_valid_spec_has_no_problems(self, l_shaped_spec):
        assert l_shaped_spec.validate() == []

    def test_reports_non_positive_dimensions(self):
        problems = DeckSpec(width=0, length=-2).validate()

        assert len(problems) == 2
        assert any("width" in p for p in problems)
        assert any("length" in p for p in problems)

    def test_wing_only_checked_for_winged_shapes(self):
        assert DeckSpec(wing_width=-1).validate() == []
        assert DeckSpec(shape=DeckShape.T_SHAPED, wing_width=-1).validate() != []

    def test_reports_zero_stair_steps(self):
        problems = DeckSpec(stairs=True, stair_steps=0).validate()
        assert any("stairSteps" in p for p in problems)

    def test_reports_bad_board_length(self):
        assert DeckSpec(board_length=-4).validate() != []

    def test_reports_infinite_dimensions(self):
        problems = DeckSpec(width=float("inf"), stairs=True, stair_width=float("nan")).validate()

        assert any("width" in p for p in problems)
        assert any("stairWidth" in p for p in problems)


# ============================================================================
# Import schema
# ============================================================================


class TestLoadSpecDocument:
    """Tests for validating untrusted spec documents."""

    def test_accepts_exported_document(self, l_shaped_spec):
        assert load_spec_document(l_shaped_spec.to_dict()) == l_shaped_spec

    def test_empty_document_gives_defaults(self):
        assert load_spec_document({}) == DeckSpec()

    def test_unknown_keys_are_ignored(self):
        spec = load_spec_document({"width": 10, "deckName": "patio"})
        assert spec.width == 10

    def test_explicit_board_length(self):
        assert load_spec_document({"boardLength": 12}).board_length == 12.0

    def test_rejects_non_object(self):
        with pytest.raises(MalformedImportError):
            load_spec_document([1, 2, 3])

    def test_rejects_negative_dimension(self):
        with pytest.raises(MalformedImportError) as exc_info:
            load_spec_document({"width": -5})
        assert exc_info.value.fields == ["width"]

    def test_rejects_unknown_shape(self):
        with pytest.raises(MalformedImportError) as exc_info:
            load_spec_document({"shape": "hexagon"})
        assert "shape" in exc_info.value.fields

    def test_rejects_bad_board_length(self):
        with pytest.raises(MalformedImportError) as exc_info:
            load_spec_document({"boardLength": -3})
        assert exc_info.value.fields == ["boardLength"]

    def test_rejects_bad_color(self):
        with pytest.raises(MalformedImportError):
            load_spec_document({"color": "brown"})

    @pytest.mark.parametrize(
        "document, field",
        [
            ({"stairs": True, "stairWidth": float("inf")}, "stairWidth"),
            ({"width": float("inf")}, "width"),
            ({"boardLength": float("nan")}, "boardLength"),
            ({"height": float("-inf")}, "height"),
        ],
    )
    def test_rejects_non_finite_numbers(self, document, field):
        with pytest.raises(MalformedImportError) as exc_info:
            load_spec_document(document)
        assert exc_info.value.fields == [field]

    def test_rejects_non_finite_furniture_position(self):
        with pytest.raises(MalformedImportError) as exc_info:
            load_spec_document({"furniture": [{"type": "table", "x": float("nan")}]})
        assert exc_info.value.fields == ["furniture"]

    def test_lenient_defaults_non_finite_fields(self):
        spec = load_spec_document(
            {"stairs": True, "stairWidth": float("inf"), "boardLength": float("nan")},
            lenient=True,
        )

        assert spec.stairs is True
        assert spec.stair_width == 4.0
        assert spec.board_length == "auto"

    def test_lenient_defaults_bad_fields(self):
        spec = load_spec_document(
            {"width": "wide", "stairSteps": 0, "railings": True}, lenient=True
        )

        assert spec.width == 12.0
        assert spec.stair_steps == 3
        assert spec.railings is True

    def test_lenient_logs_warning(self, caplog):
        with caplog.at_level("WARNING"):
            load_spec_document({"height": -1}, lenient=True)
        assert "height" in caplog.text

    def test_malformed_import_is_value_error(self):
        with pytest.raises(ValueError):
            load_spec_document("not a document")


# ============================================================================
# Units
# ============================================================================


class TestUnits:
    """Tests for feet/inch helpers."""

    def test_compose_length(self):
        assert compose_length(12, 6) == pytest.approx(12.5)
        assert compose_length(3) == 3.0

    def test_split_length(self):
        assert split_length(12.5) == (12, 6.0)
        assert split_length(7.0) == (7, 0.0)

    def test_split_length_carries_rounded_inches(self):
        assert split_length(11.999) == (12, 0.0)

    def test_format_length(self):
        assert format_length(12.0) == "12' 0\""
        assert format_length(12.5) == "12' 6\""
        assert format_length(compose_length(10, 3.5)) == "10' 3.5\""


# ============================================================================
# History
# ============================================================================


class TestSpecHistory:
    """Tests for the undo/redo stack."""

    @pytest.fixture
    def history(self):
        history = SpecHistory()
        for width in (10.0, 12.0, 14.0):
            history.push(DeckSpec(width=width))
        return history

    def test_empty_history(self):
        history = SpecHistory()

        assert history.current() is None
        assert history.undo() is None
        assert history.redo() is None
        assert not history.can_undo

    def test_current_is_last_push(self, history):
        assert history.current().width == 14.0
        assert len(history) == 3
        assert history.index == 2

    def test_undo_and_redo(self, history):
        assert history.undo().width == 12.0
        assert history.undo().width == 10.0
        assert history.undo() is None
        assert history.redo().width == 12.0
        assert history.redo().width == 14.0
        assert history.redo() is None

    def test_push_after_undo_discards_redo(self, history):
        history.undo()
        history.undo()
        history.push(DeckSpec(width=20.0))

        assert not history.can_redo
        assert len(history) == 2
        assert history.current().width == 20.0
        assert history.undo().width == 10.0

    def test_duplicate_push_is_ignored(self, history):
        history.push(DeckSpec(width=14.0))
        assert len(history) == 3

    def test_snapshots_are_values(self):
        history = SpecHistory()
        spec = DeckSpec(width=10.0)
        history.push(spec)
        spec.width = 99.0

        assert history.current().width == 10.0

    def test_capacity_drops_oldest(self):
        history = SpecHistory(max_entries=2)
        for width in (10.0, 12.0, 14.0):
            history.push(DeckSpec(width=width))

        assert len(history) == 2
        assert history.undo().width == 12.0
        assert history.undo() is None

    def test_clear(self, history):
        history.clear()
        assert len(history) == 0
        assert history.current() is None

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            SpecHistory(max_entries=0)
