"""
Core of the app framework.

- domain: app/extension descriptors and their ordering
- features: feature toggle evaluation and toggle sources
- require: the require-expression language
- resolution: the engine combining ordering, toggles and require expressions
- stores: collaborator protocols and in-memory implementations
- loader / config: descriptor documents and layered settings
"""
