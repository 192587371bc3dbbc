from importlib import import_module, util

__all__ = ["available_backends", "load_adapter"]

# name -> (pip_import_name, submodule)
_BACKENDS = {
    "networkx": ("networkx", ".networkx"),
    "dataframe": ("polars", ".dataframe_adapter"),
}


def _is_installed(modname: str) -> bool:
    return util.find_spec(modname) is not None


def available_backends() -> dict:
    return {name: _is_installed(mod) for name, (mod, _) in _BACKENDS.items()}


def load_adapter(name: str):
    """Import and return the adapter module registered under ``name``."""
    if name not in _BACKENDS:
        raise ValueError(f"Unknown adapter '{name}'")
    modname, submod = _BACKENDS[name]
    if not _is_installed(modname):
        raise ModuleNotFoundError(
            f"Optional backend '{name}' is not installed. "
            f"Install with `pip install evolvinggraphs[{name}]`."
        )
    return import_module(__name__ + submod)
