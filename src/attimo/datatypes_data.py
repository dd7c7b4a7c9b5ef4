"""Built-in datatype and category definitions.

Logic lives in datatypes.py; this file is pure data. Datatypes are seeded
in list order, so their ids are 1..17 and the built-in categories refer to
them by id.
"""

from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# Datatypes
# ---------------------------------------------------------------------------

BUILT_IN_DATATYPES: list[dict[str, Any]] = [
    {
        "name": "Opened",
        "variable_type": "time",
        "completion_value": "last",
        "completion_sort": "last",
        "value_check": "date",
        "fill_behavior": "open",
    },
    {
        "name": "Closed",
        "variable_type": "time",
        "completion_value": "date",
        "completion_sort": "last",
        "value_check": "date",
        "fill_behavior": "close",
    },
    {
        "name": "Note",
        "variable_type": "string",
        "completion_value": "no",
        "completion_sort": "no",
        "value_check": "nonempty",
        "fill_behavior": "open",
    },
    {
        "name": "Project",
        "variable_type": "string",
        "completion_value": "unique",
        "completion_sort": "last",
        "value_check": "nonempty",
        "fill_behavior": "open",
    },
    {
        "name": "Person",
        "variable_type": "string",
        "completion_value": "unique",
        "completion_sort": "frequency",
        "value_check": "nonempty",
        "fill_behavior": "open",
    },
    {
        "name": "Location",
        "variable_type": "string",
        "completion_value": "unique",
        "completion_sort": "last",
        "value_check": "nonempty",
        "fill_behavior": "open",
    },
    {
        "name": "URL",
        "variable_type": "string",
        "completion_value": "no",
        "completion_sort": "no",
        "value_check": "url",
        "fill_behavior": "open",
    },
    {
        "name": "Cost_EUR",
        "variable_type": "int",
        "completion_value": "no",
        "completion_sort": "no",
        "value_check": "no",
        "fill_behavior": "open",
    },
    {
        "name": "Deadline",
        "variable_type": "time",
        "completion_value": "date",
        "completion_sort": "last",
        "value_check": "date",
        "fill_behavior": "open",
    },
    {
        "name": "Rating",
        "variable_type": "int",
        "completion_value": "in(1,2,3,4,5)",
        "completion_sort": "frequency",
        "value_check": "range(1,5)",
        "fill_behavior": "open",
    },
    {
        "name": "Email",
        "variable_type": "string",
        "completion_value": "unique",
        "completion_sort": "no",
        "value_check": "mail",
        "fill_behavior": "open",
    },
    {
        "name": "Phone",
        "variable_type": "string",
        "completion_value": "no",
        "completion_sort": "no",
        "value_check": "phone",
        "fill_behavior": "open",
    },
    {
        "name": "File",
        "variable_type": "string",
        "completion_value": "file",
        "completion_sort": "no",
        "value_check": "file_exists",
        "fill_behavior": "open",
    },
    {
        "name": "Priority",
        "variable_type": "string",
        "completion_value": "in(Low,Medium,High,Urgent)",
        "completion_sort": "frequency",
        "value_check": "in(Low,Medium,High,Urgent)",
        "fill_behavior": "open",
    },
    {
        "name": "Status",
        "variable_type": "string",
        "completion_value": "in(Not Started,In Progress,On Hold,Completed,Cancelled)",
        "completion_sort": "last",
        "value_check": "in(Not Started,In Progress,On Hold,Completed,Cancelled)",
        "fill_behavior": "open",
    },
    {
        "name": "Tags",
        "variable_type": "csv",
        "completion_value": "unique",
        "completion_sort": "frequency",
        "value_check": "nonempty",
        "fill_behavior": "open",
    },
    {
        "name": "Progress",
        "variable_type": "int",
        "completion_value": "in(0,25,50,75,100)",
        "completion_sort": "last",
        "value_check": "range(0,100)",
        "fill_behavior": "open",
    },
]

# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

BUILT_IN_CATEGORIES: list[dict[str, Any]] = [
    {"name": "General", "columns": [1, 2, 3, 4, 6, 13]},  # Opened, Closed, Note, Project, Location, File
    {"name": "Contact", "columns": [1, 2, 3, 11, 12, 13]},  # Opened, Closed, Note, Email, Phone, File
    {"name": "Financial", "columns": [1, 2, 3, 6, 8]},  # Opened, Closed, Note, Location, Cost_EUR
]
