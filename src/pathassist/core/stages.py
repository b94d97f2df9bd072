SHOW_STAGES = [
    ("load_config", "Load config"),
    ("load_data", "Load record data"),
    ("validate_steps", "Validate steps"),
    ("resolve_scenario", "Resolve scenario"),
]

ADVANCE_STAGES = [
    *SHOW_STAGES,
    ("confirm_update", "Confirm update"),
    ("refresh", "Refresh"),
]

LIST_SOURCES_STAGES = [
    ("discover_sources", "Discover sources"),
]


STAGE_ORDER = {
    "show": SHOW_STAGES,
    "advance": ADVANCE_STAGES,
    "list-sources": LIST_SOURCES_STAGES,
}


STAGE_LABELS = {
    command: {stage_id: label for stage_id, label in stages}
    for command, stages in STAGE_ORDER.items()
}
