"""
Bot texts for Barbearia TwoWell.

Customers see these verbatim, in Portuguese. Menu numbering, trigger words,
the DD/MM/AAAA HH:MM format and its example are part of what customers are
told to type, so change them together with the router.
"""

import re
from typing import Optional

# Greeting triggers, matched against the whole trimmed message
GREETING_PATTERN = re.compile(
    r"^(menu|oi|olá|ola|bom dia|boa tarde|boa noite|borel|opa)$",
    re.IGNORECASE,
)

DEFAULT_CUSTOMER_NAME = "parceiro"

EVENT_SUMMARY = "Corte de Cabelo - Barbearia TwoWell"
EVENT_DESCRIPTION = "Agendamento para o cliente com WhatsApp: {sender_id}"

WELCOME = (
    "Forte Abraço, {name}!\n\n"
    "Como posso te ajudar hoje? Escolha uma das opções abaixo:\n\n"
    "*1* - Agendar um horário 🗓️\n"
    "*2* - Tabela de preços 💰\n"
    "*3* - Nossos Serviços 💈\n"
    "*4* - Falar com o Borel 👨‍💼\n"
    "*5* - Dúvidas Frequentes 🤔"
)

BOOKING_PROMPT = (
    "Beleza! Para agendar, por favor, me diga o dia e a hora que você gostaria.\n\n"
    "Use o formato *DD/MM/AAAA HH:MM* (ex: 25/12/2025 15:00)."
)

PRICES = (
    "Aqui estão nossos preços:\n\n"
    "*Corte Masculino:* R$ 40,00\n"
    "*Barba:* R$ 30,00\n"
    "*Corte + Barba:* R$ 65,00\n"
    "*Pezinho:* R$ 15,00\n\n"
    "Qualquer dúvida, é só chamar!"
)

SERVICES = (
    "Oferecemos o melhor para o seu estilo:\n\n"
    "- Cortes modernos e clássicos\n"
    "- Design e manutenção de barba\n"
    "- Hidratação capilar e de barba\n\n"
    "Nosso objetivo é garantir que você saia daqui renovado!"
)

HUMAN_CONTACT = (
    "Para falar diretamente com o Borel, você pode ligar ou mandar uma mensagem "
    "para o número (XX) XXXXX-XXXX. Se for urgente, pode ligar, beleza?"
)

FAQ = (
    "Algumas dúvidas comuns:\n\n"
    "*Qual o horário de funcionamento?*\n"
    "Ter a Qui: 10h às 21h\n"
    "Sex e Sáb: 9h às 22h\n\n"
    "*Onde fica a barbearia?*\n"
    "R. Alarico de Toledo Piza, 788 - Vila Silva Teles, São Paulo - SP, 08110-180\n\n"
    "*Aceitam cartão?*\n"
    "Sim! Aceitamos crédito, débito e PIX."
)

BOOKING_ACK = "Confirmando agendamento para {text}. Só um momento..."

BOOKING_SUCCESS = (
    "✅ Ótimo! Seu horário foi agendado com sucesso.\n\n"
    "Você pode ver os detalhes aqui: {link}"
)

BOOKING_FAILED = (
    "❌ Desculpe, não consegui agendar seu horário. Parece que houve um erro "
    "com a nossa agenda. Por favor, tente falar com um atendente."
)

FORMAT_HELP = (
    "❌ Ops! O formato de data e hora parece inválido. Por favor, envie novamente "
    "usando *DD/MM/AAAA HH:MM* (exemplo: 25/12/2025 15:00)."
)


def is_greeting(body: str) -> bool:
    """Check if a message is one of the menu greeting triggers."""
    return GREETING_PATTERN.match(body.strip()) is not None


def first_name(display_name: Optional[str]) -> str:
    """First word of a display name, or the generic fallback."""
    if display_name:
        parts = display_name.split()
        if parts:
            return parts[0]
    return DEFAULT_CUSTOMER_NAME


def welcome(display_name: Optional[str]) -> str:
    """Welcome message with the numbered menu."""
    return WELCOME.format(name=first_name(display_name))


# Fixed replies for menu options 2-5 (option 1 also changes state)
MENU_REPLIES: dict[str, str] = {
    "2": PRICES,
    "3": SERVICES,
    "4": HUMAN_CONTACT,
    "5": FAQ,
}
