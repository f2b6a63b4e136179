"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import TypeVar

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from vanban_assistant.clients.llm_client import LLMClient
from vanban_assistant.config import AppConfig, load_config
from vanban_assistant.errors import AssistantError, AuthenticationError
from vanban_assistant.export.docx_exporter import export_to_docx
from vanban_assistant.logging.usage_store import UsageStore
from vanban_assistant.models.diff import DiffRecord, DiffType
from vanban_assistant.models.suggestion import Suggestion, SuggestionStatus
from vanban_assistant.models.tasks import (
    DetailLevel,
    DraftTask,
    SourceDocument,
    SummarizeTask,
    ToneStyle,
)
from vanban_assistant.models.user import Role, User
from vanban_assistant.models.workspace import ProjectResultType
from vanban_assistant.parsers.document_parser import (
    load_local_text,
    needs_ai_extraction,
    read_text_file,
)
from vanban_assistant.pipeline.orchestrator import AssistantOrchestrator
from vanban_assistant.review.differ import diff_texts, side_by_side
from vanban_assistant.review.session import ReviewSession
from vanban_assistant.store.user_store import UserStore
from vanban_assistant.store.workspace_store import WorkspaceStore

app = typer.Typer(
    name="vanban",
    help="Trợ lý AI rà soát, phân tích và soạn thảo văn bản hành chính",
    no_args_is_help=True,
)
users_app = typer.Typer(help="Quản trị tài khoản và hạn mức", no_args_is_help=True)
dictionaries_app = typer.Typer(help="Từ điển viết tắt", no_args_is_help=True)
projects_app = typer.Typer(help="Không gian làm việc (KGLV)", no_args_is_help=True)
app.add_typer(users_app, name="users")
app.add_typer(dictionaries_app, name="dictionaries")
app.add_typer(projects_app, name="projects")

console = Console()

E = TypeVar("E", bound=Enum)


@dataclass
class State:
    """Per-invocation resources, created on first use."""

    config: AppConfig
    username: str | None = None
    password: str | None = None
    _user: User | None = field(default=None, repr=False)

    @cached_property
    def users(self) -> UserStore:
        store = UserStore(
            self.config.store.resolved_db_path,
            default_quota=self.config.quota.default_total,
        )
        store.seed_defaults()
        return store

    @cached_property
    def workspace(self) -> WorkspaceStore:
        store = WorkspaceStore(self.config.store.resolved_db_path)
        store.seed_defaults()
        return store

    @cached_property
    def usage(self) -> UsageStore:
        return UsageStore(self.config.store.resolved_usage_db_path)

    @cached_property
    def orchestrator(self) -> AssistantOrchestrator:
        llm = LLMClient(timeout=self.config.llm.timeout)
        return AssistantOrchestrator(
            llm,
            self.users,
            usage=self.usage,
            model=self.config.llm.model,
            fast_model=self.config.llm.fast_model,
            refine_temperature=self.config.review.refine_temperature,
            draft_temperature=self.config.review.draft_temperature,
        )

    @property
    def user(self) -> User | None:
        """The logged-in user, or None for a demo session."""
        if self.username is None:
            return None
        if self._user is None:
            if self.password is None:
                self.password = typer.prompt("Mật khẩu", hide_input=True)
            self._user = self.users.authenticate(self.username, self.password)
            if self._user is None:
                raise AuthenticationError("Tên đăng nhập hoặc mật khẩu không chính xác.")
        return self._user

    def require_user(self) -> User:
        user = self.user
        if user is None:
            raise AuthenticationError("Lệnh này cần đăng nhập (--user).")
        return user

    def require_admin(self) -> User:
        user = self.require_user()
        if not user.is_admin:
            raise AuthenticationError("Lệnh này chỉ dành cho quản trị viên.")
        return user


def _state(ctx: typer.Context) -> State:
    return ctx.obj


def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


def _parse_enum(enum_cls: type[E], raw: str) -> E:
    """Match an enum by member name (case-insensitive) or by its Vietnamese label."""
    key = raw.strip()
    for member in enum_cls:
        if key.upper() == member.name or key.lower() == member.value.lower():
            return member
    names = ", ".join(m.name.lower() for m in enum_cls)
    raise typer.BadParameter(f"'{raw}' không hợp lệ. Chọn một trong: {names}")


def _read_input(state: State, path: Path) -> str:
    if not path.exists():
        _fail(f"Không tìm thấy tệp: {path}")
    if needs_ai_extraction(path):
        with console.status(f"Đang trích xuất văn bản từ tệp: {path.name}..."):
            return asyncio.run(state.orchestrator.extract_text(state.user, path))
    return load_local_text(path)


@app.callback()
def main(
    ctx: typer.Context,
    user: str = typer.Option(None, "--user", "-u", help="Tên đăng nhập (bỏ trống = chế độ demo)"),
    password: str = typer.Option(None, "--password", help="Mật khẩu (sẽ hỏi nếu bỏ trống)"),
    config: Path = typer.Option(None, "--config", help="Đường dẫn config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Ghi log chi tiết"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    ctx.obj = State(config=load_config(config), username=user, password=password)


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------

def _print_suggestion(s: Suggestion) -> None:
    console.print(
        Panel(
            f"[bold red]GỐC:[/bold red] [strike]{escape(s.original)}[/strike]\n"
            f"[bold green]SỬA:[/bold green] {escape(s.replacement)}\n"
            f"[bold blue]LÝ DO:[/bold blue] {escape(s.reason)}",
            title=f"Đề xuất #{s.id}",
        )
    )


def _print_diff(records: list[DiffRecord]) -> None:
    table = Table(show_header=True, expand=True)
    table.add_column("Văn bản gốc", ratio=1)
    table.add_column("Văn bản đã hoàn thiện", ratio=1)
    for left, right in side_by_side(records):
        table.add_row(
            f"[red]- {escape(left)}[/red]" if left is not None and right is None
            else escape(left or ""),
            f"[green]+ {escape(right)}[/green]" if right is not None and left is None
            else escape(right or ""),
        )
    console.print(table)


def _walk_suggestions(session: ReviewSession) -> None:
    """Prompt accept/reject for each pending suggestion."""
    for s in session.suggestions:
        if not s.is_pending:
            continue
        _print_suggestion(s)
        choice = typer.prompt(
            "[a] chấp nhận / [r] bỏ qua / [A] chấp nhận tất cả / [q] dừng",
            default="a",
        )
        if choice == "A":
            session.accept_all()
            return
        if choice == "q":
            return
        if choice == "r":
            session.reject(s.id)
        else:
            applied = session.accept(s.id)
            if not applied:
                console.print("[yellow]Đoạn gốc không còn trong văn bản, đề xuất không được áp dụng.[/yellow]")


@app.command()
def review(
    ctx: typer.Context,
    file: Path = typer.Argument(help="Văn bản cần rà soát (TXT/MD/DOCX/PDF/ảnh)"),
    dictionary: str = typer.Option(None, "--dictionary", "-d", help="Mã từ điển viết tắt"),
    tone: str = typer.Option(None, "--tone", help="Giọng điệu mong muốn (neutral, persuasive, ...)"),
    accept_all: bool = typer.Option(False, "--accept-all", help="Chấp nhận tất cả đề xuất"),
    refine_tone: str = typer.Option(None, "--refine-tone", help="Tinh chỉnh sau rà soát: giọng điệu"),
    refine_detail: str = typer.Option(None, "--refine-detail", help="Tinh chỉnh sau rà soát: mức độ chi tiết"),
    docx: Path = typer.Option(None, "--docx", help="Xuất văn bản hoàn thiện ra .docx"),
    save: str = typer.Option(None, "--save", help="Lưu vào KGLV với tên dự án"),
) -> None:
    """Rà soát toàn diện: đề xuất chỉnh sửa, chấp nhận/bỏ qua, so sánh."""
    state = _state(ctx)
    try:
        text = _read_input(state, file)
        selected = None
        if dictionary:
            selected = state.workspace.get_dictionary(dictionary)
            if selected is None:
                _fail(f"Không tìm thấy từ điển: {dictionary}")
        desired_tone = _parse_enum(ToneStyle, tone) if tone else None

        with console.status("AI đang phân tích và rà soát văn bản..."):
            session = asyncio.run(
                state.orchestrator.start_review(
                    state.user, text, dictionary=selected, tone=desired_tone
                )
            )

        if not session.suggestions:
            console.print("[green]Không tìm thấy đề xuất nào. Văn bản đã rất tốt![/green]")
        elif accept_all:
            session.accept_all()
        else:
            _walk_suggestions(session)

        accepted = sum(1 for s in session.suggestions if s.status is SuggestionStatus.ACCEPTED)
        skipped = sum(1 for s in session.suggestions if s.applied is False)
        console.print(
            f"Đã chấp nhận {accepted}/{len(session.suggestions)} đề xuất"
            + (f" ([yellow]{skipped} không áp dụng được[/yellow])" if skipped else "")
            + (f", còn {session.pending_count} chờ xử lý" if session.pending_count else "")
        )

        if refine_tone or refine_detail:
            if not (refine_tone and refine_detail):
                _fail("Cần cả --refine-tone và --refine-detail để tinh chỉnh.")
            with console.status("AI đang tinh chỉnh văn bản..."):
                asyncio.run(
                    state.orchestrator.refine_session(
                        state.user,
                        session,
                        _parse_enum(ToneStyle, refine_tone),
                        _parse_enum(DetailLevel, refine_detail),
                    )
                )

        _print_diff(session.diff())
        _finish(state, session.working_text, ProjectResultType.REVIEW, docx, save)
    except AssistantError as e:
        _fail(str(e))


def _finish(
    state: State,
    content: str,
    result_type: ProjectResultType,
    docx: Path | None,
    save: str | None,
) -> None:
    if docx:
        path = export_to_docx(content, docx)
        if path:
            console.print(f"[green]DOCX đã lưu: {path}[/green]")
    if save:
        user = state.require_user()
        project = state.workspace.save_result(user.id, save.strip(), result_type, content)
        console.print(f"[green]Đã lưu kết quả vào dự án \"{escape(project.name)}\".[/green]")


@app.command()
def diff(
    original: Path = typer.Argument(help="Văn bản gốc"),
    modified: Path = typer.Argument(help="Văn bản đã sửa"),
) -> None:
    """So sánh hai tệp văn bản theo từng dòng (không dùng AI)."""
    for p in (original, modified):
        if not p.exists():
            _fail(f"Không tìm thấy tệp: {p}")
    try:
        records = diff_texts(read_text_file(original), read_text_file(modified))
    except AssistantError as e:
        _fail(str(e))
    changed = sum(1 for r in records if r.type is not DiffType.COMMON)
    _print_diff(records)
    console.print(f"{changed} dòng thay đổi")


@app.command()
def security(
    ctx: typer.Context,
    file: Path = typer.Argument(help="Văn bản cần rà soát bảo mật"),
) -> None:
    """Phát hiện thông tin có khả năng nhạy cảm."""
    state = _state(ctx)
    try:
        text = _read_input(state, file)
        with console.status("AI đang quét các thông tin nhạy cảm..."):
            warnings = asyncio.run(state.orchestrator.security_check(state.user, text))
    except AssistantError as e:
        _fail(str(e))
    if not warnings:
        console.print("[green]Không phát hiện thông tin nhạy cảm nào.[/green]")
        return
    for w in warnings:
        console.print(f"[yellow]\"{escape(w.text)}\"[/yellow]\n  Lý do: {escape(w.reason)}")


@app.command()
def evaluate(
    ctx: typer.Context,
    file: Path = typer.Argument(help="Văn bản cần đánh giá"),
) -> None:
    """Đánh giá hiệu quả văn bản (luận điểm, thuyết phục, rõ ràng)."""
    state = _state(ctx)
    try:
        text = _read_input(state, file)
        with console.status("AI đang đánh giá hiệu quả văn bản..."):
            report = asyncio.run(state.orchestrator.evaluate_effectiveness(state.user, text))
    except AssistantError as e:
        _fail(str(e))
    console.print(Panel(escape(report), title="Đánh giá Hiệu quả"))


@app.command()
def consistency(
    ctx: typer.Context,
    file: Path = typer.Argument(help="Văn bản cần kiểm tra"),
    source: Path = typer.Argument(help="Văn bản nguồn để đối chiếu"),
) -> None:
    """Đối chiếu văn bản với nguồn, chỉ ra sai lệch."""
    state = _state(ctx)
    try:
        text = _read_input(state, file)
        source_text = _read_input(state, source)
        with console.status("AI đang đối chiếu văn bản với nguồn..."):
            report = asyncio.run(state.orchestrator.check_consistency(state.user, text, source_text))
    except AssistantError as e:
        _fail(str(e))
    console.print(Panel(escape(report), title="Đối chiếu Nguồn"))


@app.command()
def refine(
    ctx: typer.Context,
    file: Path = typer.Argument(help="Văn bản cần tinh chỉnh"),
    tone: str = typer.Option(..., "--tone", help="Giọng điệu"),
    detail: str = typer.Option(..., "--detail", help="Mức độ chi tiết (concise, detailed)"),
    docx: Path = typer.Option(None, "--docx", help="Xuất ra .docx"),
) -> None:
    """Viết lại toàn bộ văn bản theo giọng điệu và mức độ chi tiết."""
    state = _state(ctx)
    try:
        text = _read_input(state, file)
        session = ReviewSession()
        session.initialize(text, [])
        with console.status("AI đang tinh chỉnh văn bản..."):
            asyncio.run(
                state.orchestrator.refine_session(
                    state.user, session, _parse_enum(ToneStyle, tone), _parse_enum(DetailLevel, detail)
                )
            )
        console.print(escape(session.working_text))
        _finish(state, session.working_text, ProjectResultType.REVIEW, docx, None)
    except AssistantError as e:
        _fail(str(e))


@app.command()
def summarize(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(help="Một hoặc nhiều văn bản"),
    task: str = typer.Option("summary", "--task", "-t", help="summary, extract_data, detect_issues, ..."),
    request: str = typer.Option(None, "--request", help="Yêu cầu tùy chỉnh (task custom_request)"),
    save: str = typer.Option(None, "--save", help="Lưu vào KGLV với tên dự án"),
) -> None:
    """Phân tích, tóm tắt, tổng hợp liên văn bản."""
    state = _state(ctx)
    try:
        summarize_task = _parse_enum(SummarizeTask, task)
        docs = [
            SourceDocument(id=i, source=f.stem, content=_read_input(state, f), file_name=f.name)
            for i, f in enumerate(files)
        ]
        data: str | list[SourceDocument] = docs
        if len(docs) == 1 and summarize_task is not SummarizeTask.MULTI_DOC_SUMMARY:
            data = docs[0].content
        with console.status("AI đang phân tích..."):
            result = asyncio.run(
                state.orchestrator.summarize(state.user, summarize_task, data, request)
            )
        console.print(Panel(escape(result), title=summarize_task.value))
        _finish(state, result, ProjectResultType.ANALYSIS, None, save)
    except (AssistantError, ValueError) as e:
        _fail(str(e))


@app.command()
def draft(
    ctx: typer.Context,
    ideas: Path = typer.Argument(help="Tệp chứa các ý chính"),
    doc_type: str = typer.Option("Công văn", "--type", help="Loại văn bản"),
    task: str = typer.Option("draft_document", "--task", "-t", help="draft_document hoặc suggest_titles"),
    tone: str = typer.Option("neutral", "--tone", help="Giọng điệu"),
    detail: str = typer.Option("detailed", "--detail", help="Mức độ chi tiết"),
    reference: Path = typer.Option(None, "--reference", help="Văn bản tham chiếu"),
    request: str = typer.Option(None, "--request", help="Chỉ thị bổ sung"),
    docx: Path = typer.Option(None, "--docx", help="Xuất ra .docx"),
    save: str = typer.Option(None, "--save", help="Lưu vào KGLV với tên dự án"),
) -> None:
    """Soạn thảo văn bản tham mưu hoặc đề xuất tiêu đề."""
    state = _state(ctx)
    try:
        reference_text = _read_input(state, reference) if reference else None
        with console.status("AI đang soạn thảo..."):
            result = asyncio.run(
                state.orchestrator.draft(
                    state.user,
                    _parse_enum(DraftTask, task),
                    _read_input(state, ideas),
                    doc_type,
                    tone=_parse_enum(ToneStyle, tone),
                    detail_level=_parse_enum(DetailLevel, detail),
                    reference_text=reference_text,
                    custom_request=request,
                )
            )
        console.print(escape(result))
        _finish(state, result, ProjectResultType.DRAFTING, docx, save)
    except AssistantError as e:
        _fail(str(e))


@app.command()
def extract(
    ctx: typer.Context,
    file: Path = typer.Argument(help="Tệp DOCX/PDF/ảnh"),
    output: Path = typer.Option(None, "--output", "-o", help="Ghi văn bản ra tệp"),
) -> None:
    """Trích xuất văn bản từ tệp."""
    state = _state(ctx)
    try:
        text = _read_input(state, file)
    except AssistantError as e:
        _fail(str(e))
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]Đã ghi: {output}[/green]")
    else:
        console.print(escape(text))


# ---------------------------------------------------------------------------
# Administration
# ---------------------------------------------------------------------------

@users_app.command("list")
def users_list(ctx: typer.Context) -> None:
    """Danh sách tài khoản."""
    state = _state(ctx)
    try:
        state.require_admin()
    except AssistantError as e:
        _fail(str(e))
    table = Table("ID", "Tài khoản", "Vai trò", "Đã dùng", "Hạn mức")
    for u in state.users.get_all_users():
        table.add_row(str(u.id), u.username, u.role.value, str(u.quota.used), str(u.quota.total))
    console.print(table)


@users_app.command("add")
def users_add(
    ctx: typer.Context,
    username: str = typer.Argument(help="Tên đăng nhập mới"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
    admin: bool = typer.Option(False, "--admin", help="Tạo tài khoản quản trị"),
) -> None:
    """Tạo tài khoản mới."""
    state = _state(ctx)
    try:
        state.require_admin()
        role = Role.SUPERADMIN if admin else Role.USER
        created = state.users.register(username, password, role=role)
        if admin:
            created = state.users.set_quota(created.id, state.config.quota.admin_total)
    except AssistantError as e:
        _fail(str(e))
    console.print(f"[green]Đã tạo tài khoản {escape(created.username)} (id={created.id}).[/green]")


@users_app.command("quota")
def users_quota(
    ctx: typer.Context,
    user_id: int = typer.Argument(help="ID tài khoản"),
    total: int = typer.Option(..., "--total", help="Tổng hạn mức"),
    used: int = typer.Option(None, "--used", help="Đặt lại số lượt đã dùng"),
) -> None:
    """Chỉnh hạn mức của một tài khoản."""
    state = _state(ctx)
    try:
        state.require_admin()
        updated = state.users.set_quota(user_id, total, used)
    except AssistantError as e:
        _fail(str(e))
    console.print(f"{updated.username}: {updated.quota.used}/{updated.quota.total}")


@users_app.command("reset-password")
def users_reset_password(
    ctx: typer.Context,
    user_id: int = typer.Argument(help="ID tài khoản"),
) -> None:
    """Đặt lại mật khẩu ngẫu nhiên."""
    state = _state(ctx)
    try:
        state.require_admin()
        new_password = state.users.reset_password(user_id)
    except AssistantError as e:
        _fail(str(e))
    console.print(f"Mật khẩu mới: [bold]{new_password}[/bold]")


@users_app.command("passwd")
def users_passwd(
    ctx: typer.Context,
    old: str = typer.Option(..., prompt="Mật khẩu cũ", hide_input=True),
    new: str = typer.Option(..., prompt="Mật khẩu mới", hide_input=True, confirmation_prompt=True),
) -> None:
    """Đổi mật khẩu của tài khoản đang đăng nhập."""
    state = _state(ctx)
    try:
        user = state.require_user()
    except AssistantError as e:
        _fail(str(e))
    if not state.users.change_password(user.id, old, new):
        _fail("Mật khẩu cũ không chính xác.")
    console.print("[green]Đã đổi mật khẩu.[/green]")


@dictionaries_app.command("list")
def dictionaries_list(ctx: typer.Context) -> None:
    """Danh sách từ điển viết tắt."""
    for d in _state(ctx).workspace.get_dictionaries():
        entries = len([line for line in d.content.splitlines() if line.strip()])
        console.print(f"  [bold]{d.id}[/bold]: {escape(d.name)} ({entries} mục)")


@dictionaries_app.command("add")
def dictionaries_add(
    ctx: typer.Context,
    name: str = typer.Argument(help="Tên từ điển"),
    file: Path = typer.Argument(help="Tệp nội dung, mỗi dòng '- VIẾT TẮT: Đầy đủ'"),
) -> None:
    """Thêm từ điển viết tắt."""
    state = _state(ctx)
    try:
        state.require_admin()
    except AssistantError as e:
        _fail(str(e))
    if not file.exists():
        _fail(f"Không tìm thấy tệp: {file}")
    try:
        content = read_text_file(file)
    except AssistantError as e:
        _fail(str(e))
    d = state.workspace.add_dictionary(name, content)
    console.print(f"[green]Đã thêm từ điển {escape(d.name)} (mã {d.id}).[/green]")


@projects_app.command("list")
def projects_list(ctx: typer.Context) -> None:
    """Các dự án đã lưu."""
    state = _state(ctx)
    try:
        user = state.require_user()
    except AssistantError as e:
        _fail(str(e))
    projects = state.workspace.get_projects(user.id)
    if not projects:
        console.print("[yellow]Chưa có dự án nào.[/yellow]")
        return
    table = Table("ID", "Tên", "Cập nhật", "Kết quả")
    for p in projects:
        kinds = [t.value for t in ProjectResultType if p.result_for(t)]
        table.add_row(p.id, escape(p.name), p.last_modified.strftime("%Y-%m-%d %H:%M"), ", ".join(kinds))
    console.print(table)


@projects_app.command("show")
def projects_show(
    ctx: typer.Context,
    project_id: str = typer.Argument(help="ID dự án"),
) -> None:
    """Xem nội dung một dự án."""
    state = _state(ctx)
    try:
        user = state.require_user()
    except AssistantError as e:
        _fail(str(e))
    project = state.workspace.get_project(user.id, project_id)
    if project is None:
        _fail(f"Không tìm thấy dự án: {project_id}")
    for t in ProjectResultType:
        content = project.result_for(t)
        if content:
            console.print(Panel(escape(content), title=f"{escape(project.name)}: {t.value}"))


@projects_app.command("delete")
def projects_delete(
    ctx: typer.Context,
    project_id: str = typer.Argument(help="ID dự án"),
) -> None:
    """Xóa một dự án."""
    state = _state(ctx)
    try:
        user = state.require_user()
    except AssistantError as e:
        _fail(str(e))
    if not state.workspace.delete_project(user.id, project_id):
        _fail(f"Không tìm thấy dự án: {project_id}")
    console.print("[green]Đã xóa dự án.[/green]")


@app.command()
def usage(
    ctx: typer.Context,
    limit: int = typer.Option(20, "--limit", "-n", help="Số bản ghi gần nhất"),
) -> None:
    """Thống kê lượt dùng AI và chi phí ước tính."""
    state = _state(ctx)
    try:
        user = state.require_user()
    except AssistantError as e:
        _fail(str(e))
    logs = state.usage.get_logs(user_id=None if user.is_admin else user.id, limit=limit)
    table = Table("Thời gian", "User", "Tác vụ", "Token vào/ra", "Chi phí", "Kết quả")
    for log in logs:
        table.add_row(
            log.timestamp.strftime("%Y-%m-%d %H:%M"),
            str(log.user_id) if log.user_id is not None else "demo",
            log.action,
            f"{log.total_input_tokens}/{log.total_output_tokens}",
            f"${log.estimated_cost_usd:.4f}",
            "OK" if log.success else f"[red]{escape(log.error_message or 'lỗi')}[/red]",
        )
    console.print(table)
    stats = state.usage.get_monthly_stats()
    console.print(
        f"Tháng {stats['month']}: {stats['total_runs']} lượt, "
        f"${stats['total_cost_usd']:.4f}, thành công {stats['success_rate']:.0f}% | "
        f"Hạn mức của bạn: {user.quota.used}/{user.quota.total}"
    )


if __name__ == "__main__":
    app()
