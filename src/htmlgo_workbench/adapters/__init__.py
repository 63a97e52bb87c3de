"""Host adapters embedding the workbench engine."""
