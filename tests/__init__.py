"""
Centralized test suite for the contact intake service.

Test Organization:
- integration/ - API flows spanning public intake, login and admin management
- App-specific tests remain in their respective app directories (e.g., contact/tests.py)
"""
