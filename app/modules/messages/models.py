# Supabase table: messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- tenant_id: uuid (foreign key to tenants.id, not null)
- name: text (not null)
- email: text (not null) - stored lower-cased
- subject: text (not null)
- message: text (not null)
- is_read: boolean (not null, default: false)
- created_at: timestamp (default: now())

RLS: anonymous inserts are allowed (public contact form); reads, updates and
deletes are limited to rows whose tenant_id the caller administers.
"""
