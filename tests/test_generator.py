"""Tests for deck composition and the main generator."""

import pytest

from core.deck_gen import (
    CostRates,
    DeckGenerator,
    FootprintSection,
    GeneratorConfig,
    MaterialTally,
    compose_sections,
    estimate_cost,
)
from core.deck_gen.composer import PRIMARY, SECOND_LEVEL, SECTION_BUILDERS, WING
from core.deck_spec import (
    BoardDirection,
    DeckShape,
    DeckSpec,
    FurnitureItem,
    InvalidSpecError,
    RailingStyle,
    StairType,
)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def generator():
    return DeckGenerator(GeneratorConfig(), CostRates())


@pytest.fixture
def square_spec():
    """12x12 rectangular deck at 1 ft, horizontal boards, no extras."""
    return DeckSpec()


@pytest.fixture
def full_spec():
    """Spec exercising every optional feature."""
    return DeckSpec(
        shape=DeckShape.L_SHAPED,
        width=16.0,
        length=12.0,
        wing_width=8.0,
        wing_length=8.0,
        height=2.5,
        picture_frame=True,
        railings=True,
        stairs=True,
        stair_steps=4,
        furniture=[
            FurnitureItem(type="table"),
            FurnitureItem(type="chair", x=3.0, z=1.0, rotation=45.0),
        ],
    )


def count(result, element_type, source_id=None):
    return sum(
        1
        for p in result.primitives
        if p.element_type == element_type and (source_id is None or p.source_id == source_id)
    )


# ============================================================================
# Composer
# ============================================================================


class TestComposeSections:
    """Tests for splitting a deck into footprint sections."""

    def test_rectangular(self):
        sections = compose_sections(DeckSpec(width=16.0, length=10.0, height=2.0))

        assert len(sections) == 1
        assert sections[0].name == PRIMARY
        assert (sections[0].width, sections[0].length) == (16.0, 10.0)
        assert sections[0].level_height == 2.0

    def test_l_shaped(self):
        spec = DeckSpec(shape=DeckShape.L_SHAPED, width=12.0, length=12.0)
        primary, wing = compose_sections(spec)

        assert wing.name == WING
        assert wing.min_x == pytest.approx(primary.max_x)
        assert wing.min_z == pytest.approx(primary.min_z)
        assert not primary.overlaps(wing)

    def test_t_shaped(self):
        spec = DeckSpec(shape=DeckShape.T_SHAPED, width=12.0, length=10.0, wing_length=4.0)
        primary, wing = compose_sections(spec)

        assert wing.offset_x == pytest.approx(0.0)
        assert wing.min_z == pytest.approx(primary.max_z)
        assert not primary.overlaps(wing)

    def test_multi_level(self):
        spec = DeckSpec(shape=DeckShape.MULTI_LEVEL, height=1.5, second_height_offset=1.0)
        primary, second = compose_sections(spec)

        assert second.name == SECOND_LEVEL
        assert second.level_height == pytest.approx(2.5)
        assert second.max_z == pytest.approx(primary.min_z)

    def test_unknown_shape(self):
        with pytest.raises(InvalidSpecError):
            compose_sections(DeckSpec(shape="hexagon"))


# ============================================================================
# Generator
# ============================================================================


class TestDeckGenerator:
    """Tests for full deck builds."""

    def test_square_deck(self, generator, square_spec):
        result = generator.generate(square_spec)

        assert result.ok
        assert result.error is None
        assert count(result, "joists") == 8
        assert count(result, "rim_joists") == 2
        assert count(result, "boards") == 24
        assert count(result, "posts") == 4
        assert count(result, "dimensions") == 2
        assert len(result.primitives) == 40
        assert result.square_feet == pytest.approx(144.0)

    def test_square_deck_tally(self, generator, square_spec):
        tally = generator.generate(square_spec).tally

        assert tally.board_feet == pytest.approx(288.0)
        assert tally.joist_feet == pytest.approx(121.25)
        assert tally.rail_feet == 0
        assert tally.railing_posts == 0
        assert tally.stair_steps == 0

    def test_square_deck_cost(self, generator, square_spec):
        cost = generator.generate(square_spec).cost

        assert cost.boards == pytest.approx(1152.0)
        assert cost.joists == pytest.approx(242.5)
        assert cost.subtotal == pytest.approx(1394.5)
        assert cost.total == pytest.approx(1394.5 * 1.05)
        assert cost.cost_per_square_foot == pytest.approx(1394.5 * 1.05 / 144.0)

    def test_rebuild_is_idempotent(self, generator, full_spec):
        first = generator.generate(full_spec)
        second = generator.generate(full_spec)

        assert len(first.primitives) == len(second.primitives)
        assert first.tally == second.tally
        assert first.primitives == second.primitives

    def test_spec_is_not_modified(self, generator, full_spec):
        before = full_spec.to_dict()
        generator.generate(full_spec)
        assert full_spec.to_dict() == before

    def test_l_shaped_sections_are_framed_and_boarded(self, generator):
        spec = DeckSpec(shape=DeckShape.L_SHAPED, wing_width=6.0, wing_length=8.0)
        result = generator.generate(spec)

        assert [s.name for s in result.sections] == [PRIMARY, WING]
        for name in (PRIMARY, WING):
            assert count(result, "joists", name) >= 1
            assert count(result, "rim_joists", name) == 2
            assert count(result, "boards", name) > 0
        assert result.square_feet == pytest.approx(144.0 + 48.0)

    def test_multi_level_second_section_is_raised(self, generator):
        spec = DeckSpec(shape=DeckShape.MULTI_LEVEL, height=1.0, second_height_offset=1.5)
        result = generator.generate(spec)
        boards = [
            p for p in result.primitives
            if p.element_type == "boards" and p.source_id == SECOND_LEVEL
        ]

        top = 2.5 - generator.config.board_thickness / 2
        assert boards
        assert all(b.position[1] == pytest.approx(top) for b in boards)

    def test_vertical_boards(self, generator):
        spec = DeckSpec(width=16.0, length=12.0, board_direction=BoardDirection.VERTICAL)
        result = generator.generate(spec)

        assert count(result, "boards") == generator.board_planner.row_count(16.0)

    def test_railings_add_cost(self, generator, square_spec):
        square_spec.railings = True
        result = generator.generate(square_spec)

        assert result.tally.railing_posts == 8
        assert result.tally.rail_feet == pytest.approx(96.0)
        assert result.cost.railing_posts == pytest.approx(400.0)
        assert result.cost.rails == pytest.approx(288.0)

    def test_cable_railing_changes_radius_only(self, generator, square_spec):
        square_spec.railings = True
        standard = generator.generate(square_spec)
        square_spec.railing_style = RailingStyle.CABLE
        cable = generator.generate(square_spec)

        assert len(cable.primitives) == len(standard.primitives)
        assert cable.tally == standard.tally
        assert {p.radius for p in cable.primitives if p.element_type == "rails"} == {0.02}

    def test_full_spec(self, generator, full_spec):
        result = generator.generate(full_spec)

        assert result.ok, result.error
        assert count(result, "frame") > 0
        assert count(result, "stair_treads") == 4
        assert count(result, "furniture") == 2
        assert result.tally.stair_steps == 4
        assert result.tally.furniture_count == 2
        assert result.cost.stairs == pytest.approx(200.0)
        assert result.cost.furniture == pytest.approx(200.0)

    def test_stairs_on_primary_front_edge(self, generator):
        spec = DeckSpec(stairs=True, stair_steps=3, stair_type=StairType.STRAIGHT)
        result = generator.generate(spec)
        treads = [p for p in result.primitives if p.element_type == "stair_treads"]

        assert len(treads) == 3
        assert all(t.position[2] > 6.0 for t in treads)

    def test_spiral_stairs(self, generator):
        spec = DeckSpec(stairs=True, stair_steps=5, stair_type=StairType.SPIRAL)
        result = generator.generate(spec)

        assert result.ok
        assert count(result, "stair_column") == 1
        assert result.tally.stair_steps == 5

    def test_dimensions_can_be_hidden(self, generator):
        result = generator.generate(DeckSpec(show_dimensions=False))
        assert count(result, "dimensions") == 0

    def test_dimension_labels(self, generator):
        result = generator.generate(DeckSpec(width=12.5, length=10.0))
        labels = sorted(p.label for p in result.primitives if p.kind == "sprite")

        assert labels == ["10' 0\"", "12' 6\""]


class TestBestEffortBuild:
    """Tests for partial builds when part of a spec is invalid."""

    def test_bad_wing_keeps_primary(self, generator):
        spec = DeckSpec(shape=DeckShape.L_SHAPED, wing_width=-6.0)
        result = generator.generate(spec)

        assert not result.ok
        assert len(result.errors) == 1
        assert result.error.startswith("Deck build failed: wing")
        assert count(result, "boards", PRIMARY) == 24
        assert count(result, "boards", WING) == 0
        assert result.square_feet == pytest.approx(144.0)

    def test_bad_stairs_keep_deck(self, generator):
        spec = DeckSpec(stairs=True, stair_steps=0)
        result = generator.generate(spec)

        assert not result.ok
        assert "stairs" in result.error
        assert count(result, "boards") == 24
        assert count(result, "stair_treads") == 0

    def test_unknown_furniture(self, generator):
        spec = DeckSpec(furniture=[FurnitureItem(type="hot_tub")])
        result = generator.generate(spec)

        assert "hot_tub" in result.error
        assert count(result, "furniture") == 0
        assert count(result, "boards") == 24

    def test_errors_are_aggregated(self, generator):
        spec = DeckSpec(
            shape=DeckShape.T_SHAPED,
            wing_length=-2.0,
            stairs=True,
            stair_steps=0,
        )
        result = generator.generate(spec)

        assert len(result.errors) == 2
        assert result.error.startswith("Deck build failed (2 problems)")

    def test_bad_primary_skips_dependents(self, generator):
        spec = DeckSpec(width=-1.0, stairs=True, furniture=[FurnitureItem(type="chair")])
        result = generator.generate(spec)

        assert len(result.errors) == 3
        assert "primary stairs: skipped, primary section failed" in result.errors
        assert "primary furniture: skipped, primary section failed" in result.errors
        assert result.primitives == []
        assert result.square_feet == 0

    def test_spec_problems_are_logged(self, generator, caplog):
        with caplog.at_level("WARNING", logger="core.deck_gen.generator"):
            generator.generate(DeckSpec(width=-1.0))

        assert "width must be finite and positive, got -1.0" in caplog.text

    def test_bad_primary_without_dependents(self, generator):
        result = generator.generate(DeckSpec(width=-1.0))

        assert len(result.errors) == 1
        assert "skipped" not in result.error

    def test_overlapping_section_is_rejected(self, generator, monkeypatch):
        def overlapping(spec):
            return [
                FootprintSection(name=PRIMARY, width=10.0, length=10.0),
                FootprintSection(name=WING, width=6.0, length=6.0, offset_x=4.0),
            ]

        monkeypatch.setitem(SECTION_BUILDERS, DeckShape.RECTANGULAR, overlapping)
        result = generator.generate(DeckSpec())

        assert result.errors == ["wing: Section 'wing' overlaps 'primary'"]
        assert result.square_feet == 100.0

    def test_unknown_shape(self, generator):
        result = generator.generate(DeckSpec(shape="hexagon"))

        assert not result.ok
        assert result.primitives == []
        assert result.sections == []

    def test_bad_stock_lengths(self):
        generator = DeckGenerator(GeneratorConfig(stock_lengths=[]))
        result = generator.generate(DeckSpec())

        assert not result.ok
        # Framing was emitted before the boards failed
        assert count(result, "joists") == 8
        assert count(result, "boards") == 0


# ============================================================================
# Results
# ============================================================================


class TestBuildResult:
    """Tests for serializing build results."""

    def test_to_dict(self, generator, square_spec):
        data = generator.generate(square_spec).to_dict()

        assert data["ok"] is True
        assert data["primitive_count"] == 40
        assert len(data["primitives"]) == 40
        assert data["tally"]["board_feet"] == 288.0
        assert data["cost"]["total"] == pytest.approx(1464.23, abs=0.01)
        assert data["sections"][0]["name"] == PRIMARY

    def test_to_dict_without_primitives(self, generator, square_spec):
        data = generator.generate(square_spec).to_dict(include_primitives=False)
        assert "primitives" not in data

    def test_to_scene_uses_spec_color(self, generator):
        result = generator.generate(DeckSpec(color="#336699"))
        scene = result.to_scene()

        assert scene.colors["decking"] == (0x33, 0x66, 0x99, 255)
        assert len(scene.get_by_type("boards")) == 24
        assert scene.count() == len(result.primitives)


class TestEstimateCost:
    """Tests for pricing a tally."""

    def test_waste_applies_to_subtotal(self):
        tally = MaterialTally(board_feet=100.0, railing_posts=2, stair_steps=3)
        cost = estimate_cost(tally, 50.0, CostRates(waste_factor=1.1))

        assert cost.subtotal == pytest.approx(400.0 + 100.0 + 150.0)
        assert cost.total == pytest.approx(650.0 * 1.1)

    def test_zero_area(self):
        cost = estimate_cost(MaterialTally(board_feet=10.0))
        assert cost.cost_per_square_foot == 0.0

    def test_tally_addition(self):
        total = MaterialTally.total(
            [MaterialTally(board_feet=1.5, railing_posts=2), MaterialTally(board_feet=2.5)]
        )
        assert total == MaterialTally(board_feet=4.0, railing_posts=2)
