"""感知模块：把页面上的表单元素序列化成文本快照"""

from typing import Any, Dict, List, Tuple
from playwright.async_api import Page
from .models import ElementSnapshot


# 只抓取固定的几类元素：输入框、文本域、下拉框、按钮、充当按钮的链接、分节标题
ELEMENT_SELECTOR = 'input, textarea, select, button, a[role="button"], h2'

FIELD_TAGS = ("input", "textarea")

# 只在浏览器里读取原始数据，value / label 的取舍在 Python 端完成
JS_CODE = """
(selector) => {
    const labelFor = (el) => {
        if (!el.id) return null;
        const labelEl = document.querySelector(`label[for="${CSS.escape(el.id)}"]`);
        return labelEl ? (labelEl.textContent || '') : null;
    };

    const elements = [];
    for (const el of document.querySelectorAll(selector)) {
        const tag = el.tagName.toLowerCase();
        let selectedText = null;
        if (tag === 'select') {
            const selected = el.options[el.selectedIndex];
            selectedText = selected ? selected.text : null;
        }

        elements.push({
            tag,
            type: el.getAttribute('type'),
            name: el.getAttribute('name'),
            fieldValue: (tag === 'input' || tag === 'textarea') ? el.value : null,
            selectedText,
            labelForText: labelFor(el),
            ownText: el.textContent,
        });
    }
    return elements;
}
"""


class Perception:
    """
    感知模块：按文档顺序读取表单元素的当前状态。
    每一步都重新读取，不做任何缓存，也不修改页面。
    """

    async def extract_elements(self, page: Page) -> Tuple[List[ElementSnapshot], str]:
        """从页面提取元素，返回元素列表 + 文本快照。"""
        items = await page.evaluate(JS_CODE, ELEMENT_SELECTOR)
        snapshots = [to_snapshot(item) for item in items]
        return snapshots, render_snapshot(snapshots)


def to_snapshot(item: Dict[str, Any]) -> ElementSnapshot:
    """
    把浏览器返回的原始数据转换成 ElementSnapshot。

    - input / textarea 的 value 是当前输入值（包含之前 fill 的结果）
    - select 的 value 是当前选中 option 的可见文本，不是 value 属性
    - 其他元素 value 恒为空
    - label：存在 label[for=id] 时取它的文本（即使为空），否则取元素自身的文本
    """
    tag = item["tag"]
    if tag in FIELD_TAGS:
        value = item.get("fieldValue") or ""
    elif tag == "select":
        value = item.get("selectedText") or ""
    else:
        value = ""

    label_text = item.get("labelForText")
    if label_text is None:
        label_text = item.get("ownText")

    return ElementSnapshot(
        tag=tag,
        type=item.get("type") or "",
        name=item.get("name") or "",
        value=value,
        label=(label_text or "").strip(),
    )


def render_snapshot(snapshots: List[ElementSnapshot]) -> str:
    """生成给 LLM 看的文本快照，每个元素一行"""
    return "\n".join(snap.render() for snap in snapshots)
