from typing import Dict, Mapping


# 回覆模板，{名稱} 為佔位符，可在 config.json 的 "replies" 中覆蓋
DEFAULT_REPLIES: Dict[str, str] = {
    "dicingResult": "{nickname} 擲骰: {detail}",
    "dicingResultWithReason": "{nickname} 因為 {reason} 擲骰: {detail}",
    "dicingPrivate": "{nickname} 進行了 {repeat} 次暗骰",
    "dicingPrivateWithReason": "{nickname} 因為 {reason} 進行了 {repeat} 次暗骰",
    "dicingPrivateResult": "在 {guild} 的暗骰結果:\n{detail}",
    "dicingPrivateNotInGuild": "暗骰只能在服務器中使用",
    "checkResultHeading": "{nickname} 進行 {name} 檢定:",
    "checkResult": "{detail}/{value} {level}",
    "checkPrivate": "{nickname} 進行了 {repeat} 次暗中檢定",
    "checkValueNotFound": "找不到屬性 {name}，請先用 .st 錄入或直接給出數值",
    "sanityCheckResult": "{nickname} 進行理智檢定: {check} {level}\n理智損失: {loss_detail}\n理智: {before} → {after}",
    "attributeChangeResult": "{nickname} 的 {name} {sign} {detail}\n{name}: {before} → {after}",
    "attributeChangeResultWithReason": "{nickname} 因為 {reason}，{name} {sign} {detail}\n{name}: {before} → {after}",
    "dndGenerateHeading": "{nickname} 的冒險者屬性:",
    "cocGenerateHeading": "{nickname} 的調查員屬性:",
    "generateCountOverstep": "生成次數超出範圍",
    "privateMessageFailed": "無法發送私訊，請檢查私訊設置",
    "attributesSaved": "已錄入 {count} 項屬性",
    "attributesEmpty": "尚未錄入任何屬性",
    "attributesCleared": "已清除 {count} 項屬性",
    "attributesClearCancelled": "已取消清除",
    "attributesConfirmOwnerOnly": "只有執行此操作的用戶可以確認",
    "setSurfaceNumberSet": "默認骰子面數已設為 {surface_number}",
    "setSurfaceNumberReset": "默認骰子面數已重置為 {surface_number}",
    "setSurfaceNumberInvalid": "默認骰子面數必須在 1 到 {max} 之間",
    "setCheckRuleSet": "檢定規則已設為 {index}. {name}",
    "setCheckRuleInvalid": "檢定規則編號必須在 0 到 {max} 之間",
    "guildOnly": "此指令只能在服務器中使用",
    "orderError": "指令格式錯誤",
    "expressionInvalid": "無效的骰子表達式",
    "expressionError": "骰子表達式結構錯誤",
    "diceNumberOverstep": "骰子數量超出範圍",
    "surfaceNumberOverstep": "骰子面數超出範圍",
    "repeatTimeOverstep": "重複次數超出範圍",
    "attributeOverstep": "檢定值超出範圍",
}

# 成功等級的顯示名稱
CHECK_LEVEL_WORDING: Dict[str, str] = {
    "critical_success": "大成功 (Critical Success)",
    "extreme_success": "極限成功 (Extreme Success)",
    "hard_success": "困難成功 (Hard Success)",
    "regular_success": "普通成功 (Regular Success)",
    "failure": "失敗 (Failure)",
    "fumble": "大失敗 (Fumble)",
}

BP_DICE_WORDING: Dict[str, str] = {
    "B": "獎勵骰",
    "P": "懲罰骰",
}


class _KeepMissing(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def format_reply(replies: Mapping[str, str], key: str, **values) -> str:
    """以模板生成回覆，缺少的佔位符保持原樣"""
    template = replies.get(key, DEFAULT_REPLIES.get(key, key))
    return template.format_map(_KeepMissing(values))
