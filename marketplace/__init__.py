# marketplace/__init__.py
