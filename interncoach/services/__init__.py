"""
High-level use cases for the InternCoach API.

Each service module orchestrates repositories to implement the business rules
(create, merge-update, delete, clear). Routers call these services instead of
manipulating the JSON file directly.
"""
