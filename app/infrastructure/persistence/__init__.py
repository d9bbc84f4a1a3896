"""SQLAlchemy persistence: engine, models, repositories, migrations."""
