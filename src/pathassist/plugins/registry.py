from importlib import import_module
from importlib.metadata import entry_points

BUILTIN_SOURCES = {
    "file": "pathassist.sources.file:FileSource",
    "http": "pathassist.sources.http:HttpSource",
}


def load_source(kind: str):
    for ep in entry_points(group="pathassist.sources"):
        if ep.name == kind:
            return ep.load()
    if kind in BUILTIN_SOURCES:
        module_name, _, attr = BUILTIN_SOURCES[kind].partition(":")
        return getattr(import_module(module_name), attr)
    raise ValueError(f"Unknown source type: {kind}")
