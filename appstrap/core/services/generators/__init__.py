"""
Generators — produce deployment artifacts from the resolved configuration.

Each generator module returns ``GeneratedFile`` instances; writing them
into the project is the caller's job.
"""
