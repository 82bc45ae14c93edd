"""Flask blueprints for the HabitGarden JSON API."""
