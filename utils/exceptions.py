class DiceRobotError(ValueError):
    """所有擲骰相關錯誤的基類"""
    reply_key = "orderError"


class OrderError(DiceRobotError):
    """指令參數格式錯誤"""
    reply_key = "orderError"


class ExpressionInvalidError(DiceRobotError):
    """骰子項無法識別 (不是常數、xDy 或 xDyKz)"""
    reply_key = "expressionInvalid"


class ExpressionError(DiceRobotError):
    """表達式結構錯誤，例如懸空的運算符或括號不匹配"""
    reply_key = "expressionError"


class DiceNumberOverstepError(DiceRobotError):
    """骰子數量超出範圍"""
    reply_key = "diceNumberOverstep"


class SurfaceNumberOverstepError(DiceRobotError):
    """骰子面數超出範圍"""
    reply_key = "surfaceNumberOverstep"


class RepeatTimeOverstepError(DiceRobotError):
    """重複次數超出範圍"""
    reply_key = "repeatTimeOverstep"


class AttributeOverstepError(DiceRobotError):
    """檢定目標值超出範圍"""
    reply_key = "attributeOverstep"


class GenerateCountOverstepError(DiceRobotError):
    """生成次數超出範圍"""
    reply_key = "generateCountOverstep"
