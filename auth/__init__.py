"""auth/ -- Authentication core for the todo app.

Credential validation, bcrypt password hashing, JWT session tokens, the user
store, and AuthService, which ties them together.

Layer rule: auth/ imports only stdlib + third-party libraries.
It does NOT import from api/, core/, or todos/.
api/ imports from auth/, not the other way around.
"""
