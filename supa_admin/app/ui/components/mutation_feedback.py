from supa_admin.app.domain.models.user import BulkActionResult
from supa_admin.clients.supabase_sdk.errors import RemoteError


def print_mutation_success(operation: str, highlighted_id: str | None = None) -> None:
    print(f"[success] operation={operation}")
    if highlighted_id:
        print(f"[highlight] registro actualizado: {highlighted_id}")


def print_mutation_error(operation: str, error: RemoteError) -> None:
    print(
        "[mutation-error] "
        f"operation={operation} "
        f"code={error.code} "
        f"message={error.message} "
        f"trace_id={error.trace_id}"
    )


def print_bulk_summary(operation: str, result: BulkActionResult) -> None:
    print(f"[bulk] operation={operation} total={result.total} success={result.succeeded} failed={result.failed}")
    for item in result.outcomes:
        if item.get("result") != "success":
            print(
                f"  user_id={item.get('user_id')} code={item.get('code', 'n/a')} "
                f"message={item.get('message', 'n/a')} trace_id={item.get('trace_id') or 'n/a'}"
            )
