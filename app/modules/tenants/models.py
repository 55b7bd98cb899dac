# Supabase tables: tenants, rate_limits; RPC: check_rate_limit
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py and app/core/security.py

"""
Expected Supabase table structure:

tenants:
- id: uuid (primary key)
- tenant_id: text (unique, not null) - public slug, ^[a-z0-9-]+$, 3-50 chars
- name: text (not null)
- logo_url: text (nullable)
- theme_config: jsonb (nullable) - selected template and colours
- is_active: boolean (not null, default: true)
- created_by: uuid (foreign key to auth.users.id, nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Tenants are never hard-deleted; deactivate with is_active = false.

rate_limits:
- key: text (primary key) - "<scope>_<client ip>"
- hits: timestamptz[] (not null) - request times inside the current window
- updated_at: timestamp (default: now())

check_rate_limit(p_key text, p_limit int, p_window_ms bigint) returns jsonb
  {"allowed": bool, "remaining": int}

Sliding window: drop hits older than now() - p_window_ms, then record this
request only if fewer than p_limit hits remain. Reference definition:

    create or replace function check_rate_limit(p_key text, p_limit int, p_window_ms bigint)
    returns jsonb language plpgsql security definer as $$
    declare
      v_cutoff timestamptz := now() - (p_window_ms || ' milliseconds')::interval;
      v_hits timestamptz[];
    begin
      insert into rate_limits(key, hits) values (p_key, '{}')
        on conflict (key) do nothing;
      select array(select h from unnest(hits) h where h > v_cutoff)
        into v_hits from rate_limits where key = p_key for update;
      if coalesce(array_length(v_hits, 1), 0) >= p_limit then
        update rate_limits set hits = v_hits, updated_at = now() where key = p_key;
        return jsonb_build_object('allowed', false, 'remaining', 0);
      end if;
      v_hits := v_hits || now();
      update rate_limits set hits = v_hits, updated_at = now() where key = p_key;
      return jsonb_build_object('allowed', true,
        'remaining', p_limit - array_length(v_hits, 1));
    end $$;
"""
