# Supabase tables: hero, about, contact_info, skills, projects, experience
# Storage bucket: Portfolio (public read)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure (every table also has
id uuid primary key, tenant_id uuid references tenants.id, created_at, updated_at):

hero (one row per tenant, unique tenant_id):
- name, title, subtitle, cta_text, cta_link, resume_url: text (nullable)
- social_links: jsonb (nullable) - {"github", "linkedin", "twitter", "email"}

about (one row per tenant, unique tenant_id):
- title, description, extra_text, profile_image_url: text (nullable)

contact_info (one row per tenant, unique tenant_id):
- email, phone, location, whatsapp, linkedin, github: text (nullable)

skills (many per tenant, listed by category):
- category: text (not null)
- skill_name: text (not null)

projects (many per tenant, newest first):
- title: text (not null)
- description: text (nullable)
- tech_stack: text[] (default: '{}')
- image_url, github_link, demo_link: text (nullable)

experience (many per tenant, newest first):
- company: text (not null)
- role: text (not null)
- period: text (nullable)
- details: text[] (default: '{}')
- skills_used: text[] (default: '{}')

Storage objects live under <folder>/<tenant slug>-<ms timestamp>-<random>.<ext>
with folder one of: profile, projects.
"""
