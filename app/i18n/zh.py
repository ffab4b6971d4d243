# -*- coding: utf-8 -*-
"""Chinese (zh) strings."""

LANG = {
    "app.title": "补丁历史",
    "common.yes": "是",
    "common.no": "否",

    # History listing
    "history.title": "项目 {project} 的补丁历史",
    "history.empty": "暂无补丁历史。",
    "history.count": "共 {count} 条记录",
    "history.item": "{id}  {time}  [{source}]  {summary}",
    "history.item_versions": "    v{base} → v{to}",
    "history.item_impact": "    +{added} ~{updated} -{removed}",
    "history.source_unknown": "—",
    "source.AI": "AI",
    "source.MANUAL": "手动",
    "source.IMPORT": "导入",
    "source.ROLLBACK": "回滚",

    # Save / rollback
    "history.saved": "补丁 {id} 已保存为版本 {version}。",
    "history.saved_no_version": "补丁 {id} 已保存。",
    "rollback.done": "项目 {project} 已回滚到补丁 {id} 之前的状态。",

    # Locale
    "locale.current": "当前语言：{locale}",
    "locale.changed": "语言已切换为 {locale}。",

    # Errors
    "errors.transport": "无法连接历史服务：{error}",
    "errors.application": "历史服务拒绝了请求：{error}",
    "errors.invalid_response": "历史服务返回了无法解析的响应：{error}",
    "errors.record_file": "无法从 {path} 读取补丁记录：{error}",
    "errors.config": "配置无效：{error}",
    "errors.preferences": "无法保存偏好设置：{error}",
}
