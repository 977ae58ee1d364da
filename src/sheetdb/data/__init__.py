"""Row sources and the conversion of sheet values into rows."""
