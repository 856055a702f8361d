"""
Test fixtures shared across all API Guardian tests.
"""

from pathlib import Path

import pytest


ROUTE_IMPORTS = """import { NextRequest, NextResponse } from 'next/server';
import { cookies } from 'next/headers';
import { createRouteHandlerClient } from '@supabase/auth-helpers-nextjs';
import { courseService } from '@/lib/services/course.service';
"""

HANDLER_TEMPLATE = """export async function {method}(request: NextRequest) {{
  try {{
    const supabase = createRouteHandlerClient({{ cookies }});
    const courses = await courseService.getCourses(supabase);
    return NextResponse.json(courses);
  }} catch (error) {{
    console.error('Error in {method}:', error);
    return NextResponse.json({{ error: 'Internal server error' }}, {{ status: 500 }});
  }}
}}
"""


def compliant_route(*methods: str) -> str:
    handlers = "\n".join(HANDLER_TEMPLATE.format(method=m) for m in methods or ("GET",))
    return f"{ROUTE_IMPORTS}\n{handlers}"


COMPLIANT_ROUTE = compliant_route("GET")

CLIENT_COMPONENT_ROUTE = """import { NextRequest, NextResponse } from 'next/server';
import { createClientComponentClient } from '@supabase/auth-helpers-nextjs';

export async function GET(request: NextRequest) {
  const supabase = createClientComponentClient();
  const { data } = await supabase.auth.getSession();
  return NextResponse.json(data);
}
"""

DIRECT_QUERY_ROUTE = """import { NextRequest, NextResponse } from 'next/server';
import { cookies } from 'next/headers';
import { createRouteHandlerClient } from '@supabase/auth-helpers-nextjs';

export async function GET(request: NextRequest) {
  const supabase = createRouteHandlerClient({ cookies });
  const users = await supabase.from('users').select('*');
  return NextResponse.json(users);
}
"""

USER_SERVICE = """import { SupabaseClient } from '@supabase/supabase-js';

export class UserService {
  constructor(private client: SupabaseClient) {}

  async getUsers(): Promise<User[]> {
    const { data } = await this.client.from('users').select('*');
    return data ?? [];
  }

  async getUserById(id: string): Promise<User | null> {
    if (!id) {
      return null;
    }
    const { data } = await this.client.from('users').select('*').eq('id', id).single();
    return data;
  }
}
"""

COURSE_SERVICE = """export class CourseService {
  async getCourses(client) {
    return [];
  }
}
"""


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def route_factory():
    """Build a compliant route file declaring the given handlers."""
    return compliant_route


@pytest.fixture
def write_file():
    return write


@pytest.fixture
def compliant_source():
    return COMPLIANT_ROUTE


@pytest.fixture
def client_component_source():
    """Browser client in a route, no try block, no cookies import."""
    return CLIENT_COMPONENT_ROUTE


@pytest.fixture
def direct_query_source():
    return DIRECT_QUERY_ROUTE


@pytest.fixture
def project(tmp_path):
    """
    A small Next.js tree.

    api/users/route.ts and api/users/[id]/route.ts both declare GET on the
    'users' resource; sorted enumeration visits [id] first.
    """
    api = tmp_path / "src" / "app" / "api"
    services = tmp_path / "src" / "lib" / "services"

    write(api / "courses" / "route.ts", compliant_route("GET"))
    write(api / "users" / "[id]" / "route.ts", compliant_route("GET"))
    write(api / "users" / "route.ts", compliant_route("GET", "POST"))
    write(services / "user.service.ts", USER_SERVICE)
    write(services / "course.service.ts", COURSE_SERVICE)
    write(services / "helpers.ts", "export function slugify(value: string): string {\n  return value;\n}\n")

    return {"root": tmp_path, "api": api, "services": services}


@pytest.fixture
def batch_project(tmp_path):
    """Four endpoint files on distinct resources: two compliant, two not."""
    api = tmp_path / "api"
    services = tmp_path / "services"
    write(api / "courses" / "route.ts", compliant_route("GET"))
    write(api / "lessons" / "route.ts", compliant_route("POST"))
    write(api / "orders" / "route.ts", CLIENT_COMPONENT_ROUTE)
    write(api / "users" / "route.ts", DIRECT_QUERY_ROUTE)
    services.mkdir(parents=True)
    return {"root": tmp_path, "api": api, "services": services}
