from bindwire.integrations.pytest_plugin.plugin import bindwire_bindings, bindwire_container

__all__ = ["bindwire_bindings", "bindwire_container"]
