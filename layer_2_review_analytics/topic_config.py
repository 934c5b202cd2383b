"""
Topic taxonomy for rule-based topic clustering
Defines the 8 fixed topics and the keywords/phrases that signal each one
"""

TOPICS = {
    'Performance': [
        'rápido', 'lento', 'desempenho', 'performance', 'demora', 'ágil', 'fluido', 'otimizado',
        'pesado', 'consome muita bateria', 'ocupa espaço', 'carregamento', 'leve',
        'demora pra abrir', 'tempo de resposta', 'estabilidade', 'travamento', 'fluidez',
    ],
    'Interface': [
        'interface', 'design', 'aparência', 'visual', 'layout', 'estética', 'ícones', 'cores',
        'fonte', 'estilo', 'tema', 'aparência limpa', 'aparência confusa', 'moderno',
        'ultrapassado', 'bonito', 'feio', 'intuitivo', 'poluído', 'organização da tela',
        'navegação', 'menus', 'experiência visual',
    ],
    'Funcionalidade': [
        'funcionalidade', 'função', 'recurso', 'ferramenta', 'opção', 'módulo', 'recurso faltando',
        'recurso novo', 'completo', 'limitado', 'funcional', 'ineficiente', 'faz o que promete',
        'não funciona', 'integração', 'compatibilidade', 'configuração', 'automação',
        'recursos úteis', 'recursos desnecessários',
    ],
    'Atualização': [
        'atualização', 'update', 'versão nova', 'versão antiga', 'melhorou', 'piorou', 'mudou tudo',
        'correção', 'novidades', 'patch', 'melhorias', 'atualização recente',
        'depois da atualização', 'atualização automática', 'falta atualização',
        'atualização constante', 'atualização demorada',
    ],
    'Suporte': [
        'suporte', 'atendimento', 'ajuda', 'contato', 'resposta', 'demora pra responder', 'equipe',
        'desenvolvedor', 'resolveram', 'não resolveram', 'suporte técnico', 'feedback',
        'responderam rápido', 'ignoraram', 'chat', 'e-mail', 'ticket', 'assistência', 'comunicação',
    ],
    'Preço': [
        'preço', 'custo', 'caro', 'barato', 'assinatura', 'pagamento', 'plano', 'gratuito', 'pago',
        'vale a pena', 'custo-benefício', 'promoção', 'cobrança', 'mensalidade', 'valor justo',
        'valor abusivo', 'renovação automática', 'teste grátis', 'aumento de preço',
    ],
    'Bugs': [
        'bug', 'erro', 'falha', 'travar', 'travando', 'crash', 'fechar sozinho', 'não abre',
        'problema', 'dá erro', 'congelar', 'lentidão', 'glitch', 'comportamento estranho',
        'instável', 'corrigir bug', 'cheio de erros', 'problema técnico',
    ],
    'Usabilidade': [
        'fácil de usar', 'difícil de usar', 'intuitivo', 'confuso', 'prático', 'simples',
        'complicado', 'usabilidade', 'experiência do usuário', 'navegação fluida',
        'curva de aprendizado', 'rápido de entender', 'interação', 'acessibilidade', 'fluxo',
        'confunde', 'ajuda', 'bem pensado', 'mal feito',
    ],
}

SAMPLES_PER_TOPIC = 10


def get_topic_list() -> list[str]:
    """
    Get list of all topic names

    Returns:
        List of topic names
    """
    return list(TOPICS.keys())


def get_topic_keywords(topic_name: str) -> list[str]:
    """
    Get the keyword list of a topic

    Args:
        topic_name: Name of the topic

    Returns:
        Keyword list, or empty list if topic not found
    """
    return list(TOPICS.get(topic_name, []))
