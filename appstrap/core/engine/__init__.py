"""
Engine — the step pipeline and its rollback manager.

Import from the submodules directly (``appstrap.core.engine.pipeline``,
``appstrap.core.engine.rollback``); services depend on the rollback
manager, and the step catalogue depends on services.
"""
