"""
Shared schema fixtures for unit tests.
"""

from types import SimpleNamespace

import pytest

from neogen.schema.types import (
    Entity,
    Multiplicity,
    end,
    outgoing,
    outgoing_rel,
    prop,
    start,
)


def build_social_schema() -> SimpleNamespace:
    """Person knows Persons and works at Companies through a WorksAt relationship."""
    company = Entity("Company", prop("name", "str"))
    person = Entity("Person", prop("name", "str"), prop("born", "date", nullable=True))
    works_at = Entity(
        "WorksAt",
        prop("since", "date", nullable=True),
        start("employee", person),
        end("company", company),
    )
    person.add(
        outgoing("friends", "KNOWS", Multiplicity.MANY, person),
        outgoing_rel("jobs", Multiplicity.MANY, works_at),
    )
    return SimpleNamespace(person=person, company=company, works_at=works_at)


@pytest.fixture
def social() -> SimpleNamespace:
    return build_social_schema()
