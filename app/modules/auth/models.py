# Supabase Auth + table: admin_users
# This module uses Supabase's built-in authentication system for identities.
# Tenant membership lives in admin_users.

"""
Supabase Auth provides:
- auth.admin.create_user() - Create a pre-confirmed admin identity at registration
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.admin.sign_out() - Revoke a session by its JWT
- auth.admin.delete_user() - Compensate a failed registration

Expected Supabase table structure:

admin_users:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null)
- tenant_id: uuid (foreign key to tenants.id, not null)
- role: text (not null, default: 'owner')
- created_at: timestamp (default: now())
- unique constraint on (user_id, tenant_id)
"""
