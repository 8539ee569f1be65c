USERS_EMAIL_CONSTRAINT = "users_email_key"
APPLICATIONS_UNIQUE_CONSTRAINT = "applications_job_applicant_key"

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    create or replace function set_updated_at() returns trigger as $$
    begin
      new.updated_at = now();
      return new;
    end;
    $$ language plpgsql
    """,
    f"""
    create table if not exists users (
      id bigserial primary key,
      email text not null,
      password_hash text not null,
      name text not null,
      role text not null check (role in ('publisher', 'applicant', 'approver')),
      created_at timestamptz not null default now(),
      updated_at timestamptz not null default now(),
      constraint {USERS_EMAIL_CONSTRAINT} unique (email)
    )
    """,
    """
    create table if not exists jobs (
      id bigserial primary key,
      publisher_id bigint not null references users (id),
      title text not null,
      description text not null,
      location text,
      salary_range text,
      status text not null default 'open' check (status in ('open', 'closed')),
      created_at timestamptz not null default now(),
      updated_at timestamptz not null default now()
    )
    """,
    f"""
    create table if not exists applications (
      id bigserial primary key,
      job_id bigint not null references jobs (id) on delete cascade,
      applicant_id bigint not null references users (id) on delete cascade,
      status text not null default 'pending'
        check (status in ('pending', 'received', 'reviewed', 'interview', 'selected', 'rejected')),
      resume_url text,
      cover_letter text,
      approver_id bigint references users (id),
      rejection_reason text,
      created_at timestamptz not null default now(),
      updated_at timestamptz not null default now(),
      constraint {APPLICATIONS_UNIQUE_CONSTRAINT} unique (job_id, applicant_id)
    )
    """,
    "create index if not exists jobs_status_created_idx on jobs (status, created_at desc)",
    "create index if not exists applications_applicant_idx on applications (applicant_id, created_at desc)",
    "drop trigger if exists users_set_updated_at on users",
    "create trigger users_set_updated_at before update on users for each row execute function set_updated_at()",
    "drop trigger if exists jobs_set_updated_at on jobs",
    "create trigger jobs_set_updated_at before update on jobs for each row execute function set_updated_at()",
    "drop trigger if exists applications_set_updated_at on applications",
    (
        "create trigger applications_set_updated_at before update on applications "
        "for each row execute function set_updated_at()"
    ),
)


def render_schema_sql() -> str:
    return "\n".join(f"{statement.strip()};\n" for statement in SCHEMA_STATEMENTS)
