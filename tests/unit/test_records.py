"""
Unit tests for record tree generation.

Tests cover:
- Name disambiguation along ancestor paths
- Field type derivation from multiplicity and nullability
- Shared and cyclic references
- Collision detection
- Rendered record text
"""

import pytest

from neogen.codegen.records import (
    ListTypeExpr,
    OptionalTypeExpr,
    PrimitiveTypeExpr,
    RecordTreeGenerator,
    RecordTypeExpr,
    attribute_type,
    disambiguated_name,
    generate_records,
    record_tree_code,
)
from neogen.config import GeneratorSettings
from neogen.errors import RecordNameCollisionError
from neogen.schema.merge import merge_schema
from neogen.schema.types import Entity, Multiplicity, PrimitiveType, outgoing, prop, start


def chain():
    c = Entity("C", prop("label", "str", nullable=True))
    b = Entity("B", outgoing("c", "HAS", Multiplicity.ONE_OR_ZERO, c))
    a = Entity("A", prop("x", "int"), outgoing("b", "HAS", Multiplicity.ONE, b))
    return a, b, c


class TestDisambiguatedName:
    """Tests for the suffix naming rule."""

    def test_single_name(self):
        assert disambiguated_name(["A"]) == "A"

    def test_distinct_names_keep_last(self):
        """Names that never repeat stay unprefixed."""
        assert disambiguated_name(["A", "B", "C"]) == "C"

    def test_repeated_name_gets_minimal_prefix(self):
        """Path [A, B, A] cuts at index 1."""
        assert disambiguated_name(["A", "B", "A"]) == "BA"

    def test_repeat_deeper_in_path(self):
        assert disambiguated_name(["Root", "A", "B", "C", "B"]) == "CB"

    def test_adjacent_repeat(self):
        assert disambiguated_name(["A", "A"]) == "AA"


class TestAttributeType:
    """Tests for attribute type derivation."""

    def test_property_types(self):
        """Properties yield primitives, optional when nullable."""
        resolve = pytest.fail
        assert attribute_type(prop("n", "int"), resolve) == PrimitiveTypeExpr(PrimitiveType.INTEGER)
        assert attribute_type(prop("n", "str", nullable=True), resolve) == OptionalTypeExpr(
            PrimitiveTypeExpr(PrimitiveType.STRING)
        )

    def test_holder_multiplicity(self):
        """Holders wrap the target record type per multiplicity."""
        target = Entity("T")
        ref = PrimitiveTypeExpr(PrimitiveType.JSON)

        def resolve(entity):
            assert entity is target
            return ref

        assert attribute_type(outgoing("a", "R", Multiplicity.ONE, target), resolve) == ref
        assert attribute_type(outgoing("a", "R", Multiplicity.ONE_OR_ZERO, target), resolve) == (
            OptionalTypeExpr(ref)
        )
        assert attribute_type(outgoing("a", "R", Multiplicity.MANY, target), resolve) == ListTypeExpr(ref)
        assert attribute_type(start("s", target), resolve) == ref

    def test_notation(self):
        """Type expressions render as type tokens."""
        ref = ListTypeExpr(OptionalTypeExpr(PrimitiveTypeExpr(PrimitiveType.FLOAT)))
        assert ref.notation() == "List<float?>"


class TestRecordTreeGenerator:
    """Tests for RecordTreeGenerator."""

    def test_distinct_names_unprefixed(self):
        """A -> B -> C keeps all names."""
        a, _, _ = chain()
        records = generate_records(a)
        assert [r.name for r in records] == ["A", "B", "C"]

    def test_record_code(self):
        """Records render one field per line with trailing commas."""
        a, _, _ = chain()
        assert record_tree_code(a) == (
            "A(\n"
            "  x: int,\n"
            "  b: B,\n"
            ")\n"
            "\n"
            "B(\n"
            "  c: C?,\n"
            ")\n"
            "\n"
            "C(\n"
            "  label: str?,\n"
            ")\n"
        )

    def test_repeated_name_renamed(self):
        """A nested entity repeating an ancestor's name gets a suffix name."""
        inner_a = Entity("A", prop("y", "int"))
        b = Entity("B", outgoing("a", "HAS", Multiplicity.MANY, inner_a))
        outer_a = Entity("A", outgoing("b", "HAS", Multiplicity.ONE, b))

        records = generate_records(outer_a)

        assert [r.name for r in records] == ["A", "B", "BA"]
        assert records[1].fields["a"].notation() == "List<BA>"
        assert records[2].path == ("A", "B", "A")

    def test_cycle_terminates(self):
        """The same entity reached again reuses its record."""
        a = Entity("A", prop("x", "int"))
        b = Entity("B", outgoing("a", "BACK", Multiplicity.ONE_OR_ZERO, a))
        a.add(outgoing("b", "TO", Multiplicity.MANY, b))

        records = generate_records(a)

        assert [r.name for r in records] == ["A", "B"]
        assert records[0].fields["b"].notation() == "List<B>"
        assert records[1].fields["a"].notation() == "A?"

    def test_shared_entity_emitted_once(self):
        """An entity reachable along two paths yields one record."""
        d = Entity("D", prop("v", "bool"))
        b = Entity("B", outgoing("d", "TO", Multiplicity.ONE, d))
        c = Entity("C", outgoing("d", "TO", Multiplicity.ONE, d))
        a = Entity("A", outgoing("b", "TO", Multiplicity.ONE, b), outgoing("c", "TO", Multiplicity.ONE, c))

        records = generate_records(a)

        assert [r.name for r in records] == ["A", "B", "D", "C"]
        assert records[3].fields["d"].record is records[2]

    def test_collision_raises(self):
        """Two distinct entities needing the same name fail fast."""
        first = Entity("Detail", prop("a", "str"))
        second = Entity("Detail", prop("b", "str"))
        root = Entity(
            "Root",
            outgoing("first", "HAS", Multiplicity.ONE, first),
            outgoing("second", "HAS", Multiplicity.ONE, second),
        )

        with pytest.raises(RecordNameCollisionError, match="Record name 'Detail'") as exc_info:
            generate_records(root)
        assert exc_info.value.paths == [["Root", "Detail"], ["Root", "Detail"]]
        assert exc_info.value.code == "RECORD_NAME_COLLISION"

    def test_merged_schema_records(self, social):
        """Relationship and endpoint attributes type to their records."""
        schema = merge_schema([social.person])

        records = generate_records(schema["Person"])
        by_name = {r.name: r for r in records}

        assert list(by_name) == ["Person", "WorksAt", "Company"]
        assert {name: t.notation() for name, t in by_name["Person"].fields.items()} == {
            "name": "str",
            "born": "date?",
            "friends": "List<Person>",
            "jobs": "List<WorksAt>",
        }
        assert {name: t.notation() for name, t in by_name["WorksAt"].fields.items()} == {
            "since": "date?",
            "employee": "Person",
            "company": "Company",
        }
        assert isinstance(by_name["WorksAt"].fields["company"], RecordTypeExpr)

    def test_interleaved_field_order(self):
        """Fields follow attribute declaration order."""
        company = Entity("Company")
        person = Entity(
            "Person",
            prop("name", "str"),
            outgoing("employer", "WORKS_AT", Multiplicity.ONE, company),
            prop("age", "int"),
        )
        record = generate_records(person)[0]
        assert list(record.fields) == ["name", "employer", "age"]

    def test_empty_entity(self):
        """An entity without attributes renders an empty block."""
        assert record_tree_code(Entity("Empty")) == "Empty(\n)\n"

    def test_settings_control_layout(self):
        """Indent and separator come from settings."""
        a, _, _ = chain()
        settings = GeneratorSettings(indent="    ", record_separator_lines=0)

        code = RecordTreeGenerator(a, settings).code()

        assert code.startswith("A(\n    x: int,\n    b: B,\n)\nB(\n")

    def test_generation_does_not_mutate_entities(self, social):
        """Renames live on records, not on entities."""
        inner = Entity("Person")
        social.company.add(outgoing("ceo", "LED_BY", Multiplicity.ONE, inner))

        records = generate_records(social.person)

        assert inner.name == "Person"
        assert "CompanyPerson" in [r.name for r in records]
