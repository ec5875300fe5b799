"""
SecurePad configuration: constants, settings locations, the resolved
settings object and the restriction policy.

Import the submodules directly (``config.resolver``, ``config.app_settings``
...); ``utils.key_store`` reads ``config.settings`` so this package keeps
its own import light.
"""
