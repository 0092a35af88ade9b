# Placeholder data shown when the API cannot be reached

DEMO_PASSWORD = "demo1234"

USERS = [
    {"id": "1", "name": "Admin User", "email": "admin@example.com", "phone": "01700000000",
     "role": "admin", "custom_role": "", "join_date": "2023-01-01"},
    {"id": "2", "name": "Normal Member", "email": "user@example.com", "phone": "01800000000",
     "role": "user", "custom_role": "", "join_date": "2023-05-15"},
]

EVENTS = [
    {"id": "101", "title": "Annual Tafsirul Quran Mahfil", "slug": "annual-tafsirul-quran-mahfil",
     "type": "mahfil", "status": "upcoming", "location": "Village Eidgah Field",
     "start_date": "2024-12-25T00:00:00", "is_public": True,
     "description": "Our biggest annual event featuring scholars from across the country."},
    {"id": "102", "title": "Winter Blanket Distribution", "slug": "winter-blanket-distribution",
     "type": "charity", "status": "completed", "location": "Community Center",
     "start_date": "2024-01-10T00:00:00", "is_public": True,
     "description": "Distributing warm clothes and blankets to families in the village."},
    {"id": "103", "title": "Weekly Quran Learning Class", "slug": "weekly-quran-class",
     "type": "quran_class", "status": "ongoing", "location": "Village Mosque",
     "start_date": "2024-11-15T00:00:00", "is_public": True,
     "description": "Quran learning sessions for children and adults every Friday morning."},
]

DONATIONS = [
    {"id": "d1", "donor_name": "Karim Hasan", "amount": 5000, "payment_method": "bkash",
     "transaction_id": "TRX738292", "status": "confirmed", "event_id": "101", "user_id": "2",
     "donation_date": "2024-11-01T10:00:00"},
    {"id": "d2", "donor_name": "Anonymous", "amount": 1000, "payment_method": "cash",
     "transaction_id": "", "status": "pending", "event_id": None, "user_id": None,
     "is_anonymous": True, "donation_date": "2024-11-03T15:30:00"},
]

FEES = [
    {"id": "f1", "user_id": "2", "amount": 200, "month": 10, "year": 2024,
     "payment_method": "bkash", "status": "paid"},
]

COMMITTEE = [
    {"id": "c1", "name": "Abdullah Al Mamun", "role_key": "president", "order": 1, "image_url": "", "phone": ""},
    {"id": "c2", "name": "Rahim Uddin", "role_key": "secretary", "order": 2, "image_url": "", "phone": ""},
]

GALLERY = [
    {"id": "g1", "title": "Blanket distribution", "image_url": "/uploads/demo-blankets.jpg",
     "category": "Charity", "date": "2024-01-10T00:00:00"},
]

SITE_CONTENT = {
    "home": {"hero_title": "Serving our community together"},
    "about": {"mission": "Helping neighbours through charity, education and events."},
}

FINANCE_SUMMARY = {
    "total_donations": 6000.0,
    "total_confirmed_donations": 5000.0,
    "total_fees": 200.0,
    "total_expenses": 1500.0,
    "net_balance": 3700.0,
    "user_count": 2,
    "event_count": 2,
    "pending_donation_count": 1,
}
