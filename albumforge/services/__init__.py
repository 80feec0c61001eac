"""
Application services layer (use cases).

Services orchestrate the domain logic to fulfill application use cases.
They coordinate between entities, ports, and the filesystem.

This layer contains:
- storage_layout: filesystem / web path rules and legacy path normalization
- derivative_generator: all-or-nothing generation of the 7 files of an upload
- lifecycle: create, delete and cascade delete with authoritative aggregates
- cover_selector: cover selection and square cover synthesis
- path_migration: persisted rewrite of legacy paths

Services depend on ports (interfaces) from core/, never on concrete
implementations from adapters/.
"""
