"""Business logic for doctors, patients, appointments and the AI helpers.

Route modules stay thin and call into these services; every Firestore
write that has to stay consistent goes through a transaction here.
"""
