"""
Instruction text for the visual-comparison model.

The system instruction carries the comparison policy: build a model of the
reference, align the photo to it while compensating for perspective, lighting and
sensor noise, and report physical print defects only.
"""

from dataclasses import dataclass

LANGUAGE_NAMES = {
    "ja": "Japanese",
    "en": "English",
}


@dataclass(frozen=True)
class PromptSet:
    system_instruction: str
    task_prompt: str


_SYSTEM_INSTRUCTION_JA = """
あなたは高精度な外観検査（AOI）のAIエキスパートです。
あなたの唯一の目的は、「参照マスター画像」と「現場の写真」を比較し、印刷されたロゴの製造欠陥を検出することです。

タスク:
1. 参照画像を分析し、完全な幾何学形状、トポロジー、色を理解してください。
2. 検査対象の写真を分析し、以下の要因を考慮してください：
   - 遠近法の歪み（傾き、回転、ズーム）。
   - 環境照明（グレア、影、反射）。
   - カメラノイズ。
3. 検査写真を脳内で参照画像に位置合わせしてください。
4. 物理的な不一致（インクの欠け、傷、形状異常、誤った色）のみを特定してください。

重要なルール:
- 照明によるアーティファクト（反射や光の当たり方）は欠陥として報告しないでください。
- 遠近法による歪みは形状欠陥として報告しないでください。
- 印刷物の「存在」と「完全性」にのみ焦点を当ててください。
- 部品の欠落（例：文字の一部欠け、ロゴの一部の消失）には厳格であってください。
- 照明によるわずかな色の変化には寛容であってください。
- 出力言語は「日本語」です。

出力:
- 判定 (Verdict): 物理的な完全性が100%保たれている場合はPASS、それ以外はFAIL。
- 欠陥リスト (Defects): 発見されたすべての物理的欠陥をリストアップしてください。
- バウンディングボックス: 各欠陥に対して正確な [ymin, xmin, ymax, xmax] (0-1000スケール) を提供してください。
""".strip()

_TASK_PROMPT_JA = (
    "これら2つの画像を比較してください。欠けや物理的な損傷がないか詳細な視覚分析を行ってください。"
    "結果を構造化されたJSONレポート（日本語）で返してください。"
)

_SYSTEM_INSTRUCTION_EN = """
You are an expert in high-precision automated optical inspection (AOI).
Your only purpose is to compare a "reference master image" with a "field photo" and detect
manufacturing defects in the printed logo.

Tasks:
1. Analyze the reference image and understand its complete geometry, topology and color.
2. Analyze the inspection photo, taking into account:
   - Perspective distortion (tilt, rotation, zoom).
   - Ambient lighting (glare, shadow, reflection).
   - Camera noise.
3. Mentally align the inspection photo to the reference image.
4. Identify physical discrepancies only (missing ink, scratches, shape anomalies, wrong colors).

Important rules:
- Do not report lighting artifacts (reflections, uneven illumination) as defects.
- Do not report perspective distortion as a shape defect.
- Focus only on the presence and completeness of the print.
- Be strict about missing elements (e.g. part of a character or part of the logo is missing).
- Be lenient about minor color shifts caused by lighting.
- The output language is {language}.

Output:
- Verdict: PASS if physical integrity is 100% preserved, otherwise FAIL.
- Defects: list every physical defect found.
- Bounding boxes: give an exact [ymin, xmin, ymax, xmax] (0-1000 scale) for each defect.
""".strip()

_TASK_PROMPT_EN = (
    "Compare these two images. Perform a detailed visual analysis for missing print or physical damage. "
    "Return the result as a structured JSON report written in {language}."
)


def get_prompts(language: str) -> PromptSet:
    """
    Return the instruction set for an output language.

    Args:
        language: Language code ("ja", "en") or a language name

    Returns:
        PromptSet for that language
    """
    code = (language or "").strip().lower()
    if code == "ja":
        return PromptSet(system_instruction=_SYSTEM_INSTRUCTION_JA, task_prompt=_TASK_PROMPT_JA)
    name = LANGUAGE_NAMES.get(code, language.strip() if language else "English")
    return PromptSet(
        system_instruction=_SYSTEM_INSTRUCTION_EN.format(language=name),
        task_prompt=_TASK_PROMPT_EN.format(language=name),
    )


@dataclass(frozen=True)
class ErrorMessages:
    """Operator-facing error text, shown as-is in the Error state"""

    missing_credential: str
    empty_response: str
    unexpected_error: str
    cancelled: str


_ERROR_MESSAGES = {
    "ja": ErrorMessages(
        missing_credential="APIキーが見つかりません。環境設定を確認してください。",
        empty_response="AIからの応答がありませんでした。",
        unexpected_error="予期せぬエラーが発生しました。",
        cancelled="解析が中断されました。",
    ),
    "en": ErrorMessages(
        missing_credential="API key not found. Check the environment configuration.",
        empty_response="No response was returned by the model.",
        unexpected_error="An unexpected error occurred.",
        cancelled="The analysis was cancelled.",
    ),
}


def get_error_messages(language: str) -> ErrorMessages:
    """Error text for an output language; English for anything but Japanese."""
    code = (language or "").strip().lower()
    return _ERROR_MESSAGES.get(code, _ERROR_MESSAGES["en"])
