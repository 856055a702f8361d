"""
Tests for the Remediation Engine — each step and the full pipeline.
"""

from apiguard.engine.remediation import (
    HEADER_IMPORT,
    NEXT_SERVER_IMPORT,
    ROUTE_CLIENT_IMPORT,
    convert_to_service_layer,
    default_service_call,
    insert_header_import,
    normalize_client,
    remediate,
    wrap_error_boundaries,
)


# --- Client normalization ---

def test_normalize_client_component(client_component_source):
    fixed = normalize_client(client_component_source)
    assert "createClientComponentClient" not in fixed
    assert "const supabase = createRouteHandlerClient({ cookies });" in fixed
    assert "import { createRouteHandlerClient } from '@supabase/auth-helpers-nextjs';" in fixed
    # existing import was renamed, not duplicated
    assert fixed.count("createRouteHandlerClient } from") == 1


def test_normalize_client_factory_drops_old_import():
    code = """import { createSupabaseClient } from '@/lib/supabase';

export async function GET() {
  const supabase = createSupabaseClient();
}
"""
    fixed = normalize_client(code)
    assert "createSupabaseClient" not in fixed
    assert fixed.startswith(ROUTE_CLIENT_IMPORT)
    assert "createRouteHandlerClient({ cookies })" in fixed


def test_normalize_client_noop_without_browser_client(compliant_source):
    assert normalize_client(compliant_source) == compliant_source


# --- Header import ---

def test_insert_header_import_when_missing(client_component_source):
    fixed = insert_header_import(client_component_source)
    assert fixed.startswith(HEADER_IMPORT + "\n")


def test_insert_header_import_noop_when_present(compliant_source):
    assert insert_header_import(compliant_source) == compliant_source


# --- Error boundary ---

def test_wrap_error_boundaries(client_component_source):
    wrapped = wrap_error_boundaries(client_component_source)
    assert "export async function GET(request: NextRequest) {\n  try {\n" in wrapped
    assert "    const supabase = createClientComponentClient();" in wrapped
    assert "} catch (error) {" in wrapped
    assert "console.error('Error in GET:', error);" in wrapped
    assert "{ status: 500 }" in wrapped


def test_wrap_error_boundaries_does_not_nest(client_component_source):
    once = wrap_error_boundaries(client_component_source)
    twice = wrap_error_boundaries(once)
    assert twice == once
    assert twice.count("try {") == 1


def test_wrap_preserves_handlers_with_try(compliant_source):
    assert wrap_error_boundaries(compliant_source) == compliant_source


def test_wrap_adds_next_server_import_when_missing():
    code = "export function DELETE(req) {\n  return remove(req);\n}\n"
    wrapped = wrap_error_boundaries(code)
    assert wrapped.startswith(NEXT_SERVER_IMPORT + "\n")
    assert "    return remove(req);" in wrapped


def test_wrap_only_touches_bodies_without_try(route_factory):
    code = route_factory("GET") + "\nexport async function POST(request: NextRequest) {\n  return NextResponse.json({});\n}\n"
    wrapped = wrap_error_boundaries(code)
    assert wrapped.count("try {") == 2
    assert "console.error('Error in POST:', error);" in wrapped


# --- Service layer ---

def test_default_service_call():
    assert default_service_call("users") == "userService.getUsers()"
    assert default_service_call("courses") == "courseService.getCourses()"
    assert default_service_call("staff") == "staffService.getStaff()"


def test_convert_to_service_layer_adds_import(direct_query_source):
    fixed = convert_to_service_layer(direct_query_source)
    assert "await userService.getUsers();" in fixed
    assert "supabase.from" not in fixed
    assert fixed.startswith("import { userService } from '@/lib/services/user.service';\n")


def test_convert_to_service_layer_one_import_per_service():
    code = (
        "const a = supabase.from('users').select('*');\n"
        "const b = supabase.from('users').select('id');\n"
        "const c = supabase.from('orders').select();\n"
    )
    fixed = convert_to_service_layer(code)
    imports = [line for line in fixed.splitlines() if line.startswith("import")]
    assert imports == [
        "import { userService } from '@/lib/services/user.service';",
        "import { orderService } from '@/lib/services/order.service';",
    ]


def test_convert_to_service_layer_skips_import_when_service_referenced():
    code = (
        "const existing = courseService.getCourses();\n"
        "const users = supabase.from('users').select('*');\n"
    )
    fixed = convert_to_service_layer(code)
    assert "userService.getUsers()" in fixed
    assert not fixed.startswith("import")


def test_convert_to_service_layer_custom_strategy():
    code = "const rows = supabase.from('lessons').select('*');"
    fixed = convert_to_service_layer(code, service_call=lambda t: f"repo.findAll('{t}')")
    assert fixed == "const rows = repo.findAll('lessons');"


# --- Pipeline ---

def test_remediate_compliant_source_is_noop(compliant_source):
    assert remediate(compliant_source, []) == compliant_source


def test_remediate_is_deterministic(client_component_source):
    assert remediate(client_component_source) == remediate(client_component_source)


def test_remediate_full_pipeline(direct_query_source):
    fixed = remediate(direct_query_source)
    assert "try {" in fixed
    assert "userService.getUsers()" in fixed
    assert "import { userService } from '@/lib/services/user.service';" in fixed
    # header import already present, so not duplicated
    assert fixed.count("from 'next/headers'") == 1


def test_remediate_twice_is_stable(client_component_source):
    once = remediate(client_component_source)
    assert remediate(once) == once


def test_wrap_one_line_handler_followed_by_block_handler():
    code = (
        "import { NextRequest, NextResponse } from 'next/server';\n"
        "\n"
        "export async function GET() { return NextResponse.json({}) }\n"
        "\n"
        "export async function POST(request: NextRequest) {\n"
        "  const body = await request.json();\n"
        "  return NextResponse.json(body);\n"
        "}\n"
    )
    wrapped = wrap_error_boundaries(code)

    assert wrapped.count("try {") == 2
    assert (
        "export async function GET() {\n  try {\n    return NextResponse.json({})\n"
        "  } catch (error) {"
    ) in wrapped
    assert (
        "export async function POST(request: NextRequest) {\n  try {\n    const body"
    ) in wrapped
    assert "console.error('Error in GET:', error);" in wrapped
    assert "console.error('Error in POST:', error);" in wrapped
    assert wrap_error_boundaries(wrapped) == wrapped
