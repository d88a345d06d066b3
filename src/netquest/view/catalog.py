from __future__ import annotations

from netquest.rules.catalog import MissionCatalog, RuleCatalog
from netquest.rules.content import Content


def build_catalog(catalog: RuleCatalog, content: Content) -> dict:
    """Static reference data a client needs to draw the mission screens."""

    def mission_entry(mission: MissionCatalog) -> dict:
        entry: dict = {
            "id": str(mission.id),
            "title": mission.title,
            "description": mission.description,
            "budget": mission.budget,
            "reward": mission.reward,
            "playable": mission.playable,
            "summary": [
                {
                    "icon": section.icon,
                    "title": section.title,
                    "content": section.content,
                    "details": list(section.details),
                }
                for section in mission.summary
            ],
        }
        if mission.lan is not None:
            entry["lan"] = {
                "prefix": mission.lan.prefix,
                "subnetMask": mission.lan.subnet_mask,
                "gateway": mission.lan.gateway,
                "dns": mission.lan.dns,
            }
        if mission.entities:
            entry["entities"] = [{"name": d.name, "label": d.label, "suggestedIp": d.ip} for d in mission.entities]
        if mission.existing_devices:
            entry["existingDevices"] = [{"name": d.name, "label": d.label, "ip": d.ip} for d in mission.existing_devices]
        if mission.store_items:
            entry["storeItems"] = [
                {
                    "id": item.id,
                    "name": item.name,
                    "category": item.category,
                    "price": item.price,
                    "description": item.description,
                }
                for item in mission.store_items.values()
            ]
            entry["minCables"] = mission.min_cables
        if mission.equipment:
            entry["equipment"] = [
                {
                    "id": option.id,
                    "name": option.name,
                    "cost": option.cost,
                    "description": option.description,
                    "recommended": option.recommended,
                }
                for option in mission.equipment.values()
            ]
        if mission.firewall_rules:
            entry["firewallRules"] = [
                {"id": rule.id, "name": rule.name, "description": rule.description, "critical": rule.critical}
                for rule in mission.firewall_rules.values()
            ]
            entry["ports"] = [{"port": p.port, "name": p.name, "danger": p.danger} for p in mission.ports]
        if mission.router is not None:
            # The ISP sheet handed to the player.
            wan = mission.router.wan
            entry["ispSheet"] = {
                "ipAddress": wan.ip_address,
                "subnetMask": wan.subnet_mask,
                "gateway": wan.gateway,
                "dns1": wan.dns1,
                "dns2": wan.dns2,
            }
        mission_content = content.missions.get(mission.id)
        if mission_content is not None and mission_content.choice is not None:
            choice = mission_content.choice
            entry["securityChoice"] = {
                "question": choice.question,
                "options": [{"id": o.id, "text": o.text} for o in choice.options],
            }
        return entry

    return {
        "initialMission": str(catalog.initial_mission),
        "initialBudget": catalog.initial_budget,
        "missions": [mission_entry(m) for m in catalog.ordered()],
    }
