"""
File: app/db/models/steam_link.py
Description: 钱包 ↔ Steam 账号绑定模型 (User-Link record)

一行对应一个钱包地址：
- wallet_address: 唯一，0x + 40 位十六进制
- steam_id: 可空，但非空时全表唯一 (一个 Steam 账号只能绑定一个钱包)
- steam_username / steam_avatar / steam_profile_url: 绑定时从 Steam 拉取的展示字段，
  不保证新鲜度，不会自动同步
- trade_url: 可空，写入前必须通过格式校验

唯一约束由数据库保证，配合 Service 层的条件更新消除 check-then-act 竞态。
记录只会创建/更新，从不删除。

Created: 2026-03-02
"""

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import UUIDModel


class SteamLink(UUIDModel):
    """
    钱包绑定记录
    """

    # --------------------------------------------------------------------------
    # 数据库级约束 (Constraints)
    # --------------------------------------------------------------------------
    __table_args__ = (
        CheckConstraint(
            "length(wallet_address) = 42", name="wallet_length"
        ),
        CheckConstraint(
            "steam_id IS NULL OR length(steam_id) = 17",
            name="steam_id_length",
        ),
    )

    # --------------------------------------------------------------------------
    # 主键凭证
    # --------------------------------------------------------------------------

    wallet_address: Mapped[str] = mapped_column(
        String(42),
        unique=True,
        nullable=False,
        comment="钱包地址 (0x + 40 hex)",
    )

    # --------------------------------------------------------------------------
    # Steam 身份
    # --------------------------------------------------------------------------

    steam_id: Mapped[str | None] = mapped_column(
        String(17), unique=True, nullable=True, comment="SteamID64"
    )

    steam_username: Mapped[str | None] = mapped_column(
        String(255), nullable=True, comment="Steam 昵称 (绑定时快照)"
    )

    steam_avatar: Mapped[str | None] = mapped_column(
        String(512), nullable=True, comment="Steam 头像 URL"
    )

    steam_profile_url: Mapped[str | None] = mapped_column(
        String(512), nullable=True, comment="Steam 个人主页 URL"
    )

    # --------------------------------------------------------------------------
    # 交易
    # --------------------------------------------------------------------------

    trade_url: Mapped[str | None] = mapped_column(
        String(512), nullable=True, comment="Steam 交易报价链接"
    )

    @property
    def is_steam_linked(self) -> bool:
        return bool(self.steam_id)

    @property
    def has_trade_url(self) -> bool:
        return bool(self.trade_url)
