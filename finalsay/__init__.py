# FinalSay: tone-controlled reply generation service.
