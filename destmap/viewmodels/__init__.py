"""ViewModel package for UI state and command surfaces.

Call context:
    ``destmap.web_ui`` imports concrete viewmodels from this package to bind
    NiceGUI widgets to form state and commands.

Dependencies:
    Modules in this package depend on domain types and use-case callables
    only. Transport adapters are injected from ``destmap.app.controller``.

Responsibilities:
    - Hold the destination form state and enforce field-level rules.
    - Gate destination entry behind a verified credential session.
    - Map places-provider selections into form fields.
    - Expose the single-slot status message shown under the form.
"""
