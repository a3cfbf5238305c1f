"""UI strings used inside generated notes, with English fallback."""

from __future__ import annotations


TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "noRecentNews": "No recent news found for",
        "errorRetrieving": "Error retrieving news for",
        "generatedAt": "Generated at",
        "tableOfContents": "Table of Contents",
        "processingStatus": "Processing Status",
        "keyDevelopments": "Key Developments",
        "analysisContext": "Analysis & Context",
        "limitedNews": "Limited substantive news found for",
        "dailyNews": "Daily News",
        "topicFailed": "failed",
        "topicNoNews": "no recent news",
    },
    "fr": {
        "noRecentNews": "Aucune actualité récente trouvée pour",
        "errorRetrieving": "Erreur lors de la récupération des actualités pour",
        "generatedAt": "Généré à",
        "tableOfContents": "Table des matières",
        "processingStatus": "État du traitement",
        "keyDevelopments": "Développements clés",
        "analysisContext": "Analyse et contexte",
        "limitedNews": "Peu d'actualités substantielles trouvées pour",
        "dailyNews": "Actualités du jour",
        "topicFailed": "échec",
        "topicNoNews": "aucune actualité récente",
    },
    "de": {
        "noRecentNews": "Keine aktuellen Nachrichten gefunden für",
        "errorRetrieving": "Fehler beim Abrufen der Nachrichten für",
        "generatedAt": "Erstellt um",
        "tableOfContents": "Inhaltsverzeichnis",
        "processingStatus": "Verarbeitungsstatus",
        "keyDevelopments": "Wichtige Entwicklungen",
        "analysisContext": "Analyse & Kontext",
        "limitedNews": "Nur wenige relevante Nachrichten gefunden für",
        "dailyNews": "Tägliche Nachrichten",
        "topicFailed": "fehlgeschlagen",
        "topicNoNews": "keine aktuellen Nachrichten",
    },
    "es": {
        "noRecentNews": "No se encontraron noticias recientes sobre",
        "errorRetrieving": "Error al obtener noticias sobre",
        "generatedAt": "Generado a las",
        "tableOfContents": "Índice",
        "processingStatus": "Estado del procesamiento",
        "keyDevelopments": "Acontecimientos clave",
        "analysisContext": "Análisis y contexto",
        "limitedNews": "Pocas noticias relevantes sobre",
        "dailyNews": "Noticias del día",
        "topicFailed": "fallido",
        "topicNoNews": "sin noticias recientes",
    },
    "it": {
        "noRecentNews": "Nessuna notizia recente trovata per",
        "errorRetrieving": "Errore nel recupero delle notizie per",
        "generatedAt": "Generato alle",
        "tableOfContents": "Indice",
        "processingStatus": "Stato di elaborazione",
        "keyDevelopments": "Sviluppi principali",
        "analysisContext": "Analisi e contesto",
        "limitedNews": "Poche notizie rilevanti trovate per",
        "dailyNews": "Notizie del giorno",
        "topicFailed": "non riuscito",
        "topicNoNews": "nessuna notizia recente",
    },
    "pt": {
        "noRecentNews": "Nenhuma notícia recente encontrada sobre",
        "errorRetrieving": "Erro ao obter notícias sobre",
        "generatedAt": "Gerado às",
        "tableOfContents": "Índice",
        "processingStatus": "Status do processamento",
        "keyDevelopments": "Principais acontecimentos",
        "analysisContext": "Análise e contexto",
        "limitedNews": "Poucas notícias relevantes sobre",
        "dailyNews": "Notícias do dia",
        "topicFailed": "falhou",
        "topicNoNews": "sem notícias recentes",
    },
    "zh": {
        "noRecentNews": "未找到近期新闻：",
        "errorRetrieving": "获取新闻时出错：",
        "generatedAt": "生成于",
        "tableOfContents": "目录",
        "processingStatus": "处理状态",
        "keyDevelopments": "主要进展",
        "analysisContext": "分析与背景",
        "limitedNews": "相关新闻较少：",
        "dailyNews": "每日新闻",
        "topicFailed": "失败",
        "topicNoNews": "无近期新闻",
    },
    "ja": {
        "noRecentNews": "最近のニュースが見つかりません：",
        "errorRetrieving": "ニュースの取得中にエラーが発生しました：",
        "generatedAt": "生成日時",
        "tableOfContents": "目次",
        "processingStatus": "処理状況",
        "keyDevelopments": "主な動き",
        "analysisContext": "分析と背景",
        "limitedNews": "関連ニュースが少ない：",
        "dailyNews": "デイリーニュース",
        "topicFailed": "失敗",
        "topicNoNews": "最近のニュースなし",
    },
}

NO_NEWS_MARKER = "No recent news found"


def has_translations(language: str) -> bool:
    return language in TRANSLATIONS


def get_translation(key: str, language: str) -> str:
    """Return the string for key in language, falling back to English, then the key."""
    table = TRANSLATIONS.get(language) or TRANSLATIONS["en"]
    return table.get(key) or TRANSLATIONS["en"].get(key, key)
