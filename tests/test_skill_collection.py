from __future__ import annotations

import pytest

from codeportfolio.models.caller import CallerContext
from codeportfolio.models.errors import NotFoundError, ValidationError
from codeportfolio.services import portfolio_store, skill_collection


@pytest.fixture
def portfolio_id(caller: CallerContext) -> int:
    return portfolio_store.create_portfolio(caller, "jane").id


def test_add_skill_trims_name_and_category(caller: CallerContext, portfolio_id: int) -> None:
    skill = skill_collection.add_skill(caller, portfolio_id, "  Rust ", "  ")

    assert skill.name == "Rust"
    assert skill.category is None


def test_blank_skill_name_is_rejected(caller: CallerContext, portfolio_id: int) -> None:
    with pytest.raises(ValidationError) as excinfo:
        skill_collection.add_skill(caller, portfolio_id, "   ")

    assert excinfo.value.message == "Please enter a skill name"


def test_duplicate_names_are_kept(caller: CallerContext, portfolio_id: int) -> None:
    skill_collection.add_skill(caller, portfolio_id, "Go")
    skill_collection.add_skill(caller, portfolio_id, "go")

    names = [s.name for s in skill_collection.list_skills(caller, portfolio_id)]

    assert names == ["Go", "go"]


def test_delete_skill(caller: CallerContext, other_caller: CallerContext, portfolio_id: int) -> None:
    skill = skill_collection.add_skill(caller, portfolio_id, "Go")

    with pytest.raises(NotFoundError):
        skill_collection.delete_skill(other_caller, skill.id)

    skill_collection.delete_skill(caller, skill.id)

    assert skill_collection.list_skills(caller, portfolio_id) == []
