"""
Services package.

- storage: the backend's household/donation records (memory, Google Sheets)
- persistence: the dashboard's adapters (remote API or local storage)
"""
