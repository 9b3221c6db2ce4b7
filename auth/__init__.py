"""auth/ -- Credential core for credkeeper: validation, hashing, storage, orchestration.

Layer rule: auth/ imports only stdlib + third-party libraries.
It does NOT import from api/ or core/. api/ imports from auth/, not the
other way around. Configuration values (e.g. the bcrypt cost) are passed in
by whoever builds the service.
"""
