"""
Movie Night - Source Package

This package contains the core functionality for the movie night app:
- pick_scoring: Movie scores and the weekly pick
- movie_night: Sign up, proposals, ratings and watch history
- movie_models: Movie, user and group records
- group_schedule: When a group next meets
- movie_store: Storage interface and in-memory store
- sheet_store: Google Sheets storage backend
- identity: Who is signed in
- rating_widget: Star rating control
- errors: Error types
- utils: Configuration, logging and constants
"""
