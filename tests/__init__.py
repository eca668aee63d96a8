"""Test suite for c4render.

Test Structure:
- unit/: Unit tests per area (caching, rendering, exporter, config, cli, workspace, utils)
- fakes.py: Scripted rendering agent, parser and diagram exporter
- conftest.py: Shared fixtures
"""
