"""Platform layer: subprocess execution and filesystem helpers.

Import from the submodules directly (``orbit.platform.process``,
``orbit.platform.files``); ``orbit.core`` depends on this package.
"""
