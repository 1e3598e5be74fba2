"""
Dynamic Logic service package.

Handles form appearance and behaviour depending on record values:

- app.logic: Condition models, predicate evaluation and the engine that
  pushes field/panel/option-list state to a form view.

Guidelines:
- The engine is stateless between passes apart from its definitions.
- Evaluation never raises on malformed definitions; it degrades to false.
"""
