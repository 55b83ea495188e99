"""
Routers module - API endpoint handlers organized by feature.

- auth: Registration (creates the family) and login
- users: Current user profile
- events: Local event CRUD with background Google sync
- calendar: Merged multi-source events and week/day layouts
- members: Family members and their personal iCal feeds
- family_calendars: Shared iCal feeds
- meal_plans: Planned meals
- google_auth: Google OAuth and target calendar selection
"""
