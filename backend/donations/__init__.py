"""Community donations backend: JazzCash payment initiation and callback reconciliation."""
