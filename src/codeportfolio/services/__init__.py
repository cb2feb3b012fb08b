"""Services"""

from codeportfolio.services.autosave import AutosaveController
from codeportfolio.services.completion import (
    CompletionStatus,
    EditorNavigator,
    NavigationResult,
    compute_completion,
)
from codeportfolio.services.portfolio_store import (
    clear_avatar,
    create_portfolio,
    delete_portfolio,
    get_portfolio,
    list_portfolios,
    load_editor_snapshot,
    set_avatar,
    update_profile,
)
from codeportfolio.services.project_collection import (
    add_project,
    delete_project,
    list_projects,
    remove_project_image,
    reorder_projects,
    update_project,
    upload_project_images,
)
from codeportfolio.services.publish import (
    render_public_portfolio,
    resolve_public_portfolio,
    toggle_publish,
)
from codeportfolio.services.skill_collection import add_skill, delete_skill, list_skills
from codeportfolio.services.username_registry import check_availability, validate_username
from codeportfolio.services.editor import EditorSession, Notification

__all__ = [
    "AutosaveController",
    "CompletionStatus",
    "EditorNavigator",
    "NavigationResult",
    "compute_completion",
    "clear_avatar",
    "create_portfolio",
    "delete_portfolio",
    "get_portfolio",
    "list_portfolios",
    "load_editor_snapshot",
    "set_avatar",
    "update_profile",
    "add_project",
    "delete_project",
    "list_projects",
    "remove_project_image",
    "reorder_projects",
    "update_project",
    "upload_project_images",
    "render_public_portfolio",
    "resolve_public_portfolio",
    "toggle_publish",
    "add_skill",
    "delete_skill",
    "list_skills",
    "check_availability",
    "validate_username",
    "EditorSession",
    "Notification",
]
