"""Constants for mlotasks.

This module centralizes default values and seed data used throughout the package.
"""

# Task defaults
DEFAULT_TASK_TITLE = "New Task"
DEFAULT_IMPORTANCE = 100
DEFAULT_URGENCY = 100
DEFAULT_COMPUTED_SCORE = 0

# Context/view defaults
DEFAULT_CONTEXT_NAME = "New Context"
DEFAULT_VIEW_NAME = "New View"
DEFAULT_VIEW_SORTING = {"field": "order", "direction": "asc"}

# Export format
EXPORT_VERSION = "1.0"

# Seeded on demand by ContextRepository.create_default_contexts()
DEFAULT_CONTEXTS = [
    {"name": "@Work", "icon": "briefcase", "color": "#4A90E2"},
    {"name": "@Home", "icon": "home", "color": "#7ED321"},
    {"name": "@Computer", "icon": "laptop", "color": "#9B9B9B"},
    {"name": "@Phone", "icon": "phone", "color": "#F5A623"},
    {"name": "@Errands", "icon": "shopping-cart", "color": "#D0021B"},
]

# Seeded by ViewRepository.init() when no views are stored
BUILT_IN_VIEWS = [
    {
        "name": "All Tasks",
        "type": "outline",
        "isBuiltIn": True,
        "filters": {},
        "sorting": {"field": "order", "direction": "asc"},
        "showCompleted": True,
        "showHierarchy": True,
        "columns": ["title", "dueDate", "importance", "contexts"],
    },
    {
        "name": "To-Do",
        "type": "todo",
        "isBuiltIn": True,
        "filters": {"isCompleted": False},
        "sorting": {"field": "computedScore", "direction": "desc"},
        "showCompleted": False,
        "showHierarchy": False,
        "columns": ["title", "dueDate", "importance", "urgency"],
    },
    {
        "name": "Inbox",
        "type": "inbox",
        "isBuiltIn": True,
        "filters": {"isInInbox": True},
        "sorting": {"field": "createdAt", "direction": "desc"},
        "showCompleted": False,
        "showHierarchy": False,
        "columns": ["title", "createdAt"],
    },
    {
        "name": "Active Actions",
        "type": "active",
        "isBuiltIn": True,
        "filters": {"isActive": True, "isCompleted": False},
        "sorting": {"field": "computedScore", "direction": "desc"},
        "showCompleted": False,
        "showHierarchy": False,
        "columns": ["title", "dueDate", "importance"],
    },
    {
        "name": "Goals",
        "type": "goals",
        "isBuiltIn": True,
        "filters": {"hasGoalType": True},
        "grouping": {"field": "goalType"},
        "sorting": {"field": "importance", "direction": "desc"},
        "showCompleted": False,
        "showHierarchy": True,
        "columns": ["title", "goalType", "dueDate"],
    },
    {
        "name": "Review",
        "type": "review",
        "isBuiltIn": True,
        "filters": {"needsReview": True},
        "sorting": {"field": "lastReviewed", "direction": "asc"},
        "showCompleted": False,
        "showHierarchy": True,
        "columns": ["title", "lastReviewed", "reviewPeriod"],
    },
]
